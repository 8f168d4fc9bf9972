"""SwitchBot device commands exposed over the Model Context Protocol."""

__version__ = "1.1.0"

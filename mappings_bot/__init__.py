"""
Mappings Bot
Discord bot for looking up Minecraft mappings (MCP and Yarn).
"""

__version__ = "1.0.0"

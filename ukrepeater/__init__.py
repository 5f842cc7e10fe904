"""UK Repeater Bot: repeater directory lookups and APRS passcodes for chat commands"""

__version__ = "1.0.0"

"""Command plugins for the UK Repeater Bot"""

"""
Configuration management for Relaycord.

- app_configuration: YAML-backed application settings
- relay_settings: typed accessors for the chat relay section
"""

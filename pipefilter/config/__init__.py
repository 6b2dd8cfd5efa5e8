"""
Config Module - Black Box Interface

Purpose: Load settings for transformation plugins
Interface: ConfigProvider (EnvConfigProvider, YamlConfigProvider),
           TransformationConfig, LoggingConfig
Hidden: Config sources, validation logic, environment parsing
"""

APP_NAME = "starconfig"
ENV_PREFIX = "STARCONFIG_"

# Specifiers wrapped in this character on both ends name an environment variable.
ENV_SENTINEL = "%"
DEFAULT_ENV_VARIABLE = "StarConfigPath"
DEFAULT_SPECIFIER = f"{ENV_SENTINEL}{DEFAULT_ENV_VARIABLE}{ENV_SENTINEL}"

XML_ROOT_NODE = "config"
XML_ATTRIBUTE_PREFIX = "@"
XML_TEXT_KEY = "#text"

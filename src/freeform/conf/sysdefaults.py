''' System level defaults, looked up after the config files and the module defaults. '''

LOG_LEVEL = "info"
LOG_FORMATTER = (
    "[%(asctime)-8s] "
    "%(process)3d "
    "[%(name)16.16s - %(filename)16.16s:%(lineno)-4d]%(levelname)6s "
    "%(message)s"
)
LOG_DATEFMT = "%H:%M:%S"
LOG_OUTPUT = None
LOG_COLORED = False

# Print module configuration. Accept the name of a module. E.g. "freeform.form"
DEBUG_MODULE_CONFIG = None

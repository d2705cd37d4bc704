''' Module loggers, configured from the LOG_* values of the module config. '''
import logging
import platform
import sys
from typing import Optional

from freeform.conf import ModuleConfig, default_config, getConfig


def getLoggerHandler(logspec: Optional[str] = None):
    ''' Handler for a LOG_OUTPUT value: "stderr" (default), "stdout" or "file://<path>" '''
    if logspec is None or logspec == "stderr":
        return logging.StreamHandler(sys.stderr)

    if logspec == "stdout":
        return logging.StreamHandler(sys.stdout)

    if logspec.startswith("file://"):
        return logging.FileHandler(logspec[len("file://"):])

    raise ValueError("Cannot parse logging spec: %s" % logspec)


def _config_str(log_config, name):
    value = log_config.get(name)
    return value if isinstance(value, str) else None


def __closure__():
    FREEFORM_LOGGERS = dict()

    def setupLogger(module_name: Optional[str], log_config: ModuleConfig):
        module_logger = logging.getLogger(module_name)
        if log_config is None:
            return module_logger

        level_str = _config_str(log_config, "LOG_LEVEL")
        log_level = getattr(logging, level_str.upper(), logging.NOTSET) if level_str else logging.NOTSET
        module_logger.setLevel(log_level)

        log_output = _config_str(log_config, "LOG_OUTPUT")
        log_handlers = [getLoggerHandler(log_output)] if log_output else []

        log_formatter = _config_str(log_config, "LOG_FORMATTER")
        log_datefmt = _config_str(log_config, "LOG_DATEFMT")
        if log_formatter:
            fmt = log_formatter.format(hostname=platform.node().split(".")[0])
            for handler in log_handlers:
                handler.setFormatter(logging.Formatter(fmt, log_datefmt))

            if default_config.LOG_COLORED:
                import coloredlogs
                coloredlogs.install(fmt=fmt, datefmt=log_datefmt, level=log_level, logger=module_logger)

        # The root logger gets its handlers through basicConfig
        if module_name is None:
            logging.basicConfig(handlers=log_handlers)
        else:
            for handler in log_handlers:
                module_logger.addHandler(handler)

        FREEFORM_LOGGERS[module_name] = module_logger
        return module_logger

    def getLogger(module_name, log_config=None):
        if module_name in FREEFORM_LOGGERS:
            return FREEFORM_LOGGERS[module_name]

        return setupLogger(module_name, log_config or getConfig(module_name))

    return getLogger, setupLogger(None, default_config)


getLogger, default_logger = __closure__()

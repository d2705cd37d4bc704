''' Module configuration.

    Each configured module gets a section of the same name. A value is looked up
    in the config files (FREEFORM_CONFIG_FILE, "|" separated, missing files are
    skipped), then in the module defaults, then in `sysdefaults`. Only UPPERCASE
    names of the defaults are configuration values, and the type of the default
    decides how the file value is parsed.
'''
import configparser
import json
import logging
import os
import re

from ast import literal_eval
from types import ModuleType
from typing import Any, Dict, Union

from . import sysdefaults

FREEFORM_SYSTEM_DEFAULTS = os.environ.get("FREEFORM_SYSTEM_DEFAULTS", "sysdefaults")
FREEFORM_CONFIG_FILES = os.environ.get("FREEFORM_CONFIG_FILE", "base.ini|config.ini").split('|')
DEBUG_ALL_CONFIG_VALUE = "#ALL"

RX_INVALID_OPTION = re.compile(r"[^A-Za-z\d_]+")


def _parse_value(parser, section, key, default):
    # bool before int, bool being a subclass of int
    if isinstance(default, bool):
        return parser.getboolean(section, key)
    if isinstance(default, int):
        return parser.getint(section, key)
    if isinstance(default, float):
        return parser.getfloat(section, key)
    if isinstance(default, (dict, list, tuple)):
        return json.loads(parser.get(section, key))
    if default is None:
        value = parser.get(section, key)
        try:
            return literal_eval(value)
        except (ValueError, SyntaxError):
            return value
    if isinstance(default, str):
        return parser.get(section, key)

    raise ValueError(f"Not supported config value type [{type(default)}].")


def __module_config__():
    __parser__ = configparser.ConfigParser()
    __parser__.optionxform = lambda s: RX_INVALID_OPTION.sub("_", s.strip()).upper()
    __parser__.read(FREEFORM_CONFIG_FILES)

    __config__: Dict[str, "ModuleConfig"] = {}

    class ModuleConfig(object):
        def __init__(self, module_name: str, *defaults):
            if module_name in __config__:
                raise RuntimeError(f"Module [{module_name}] already configured.")

            if not __parser__.has_section(module_name):
                __parser__.add_section(module_name)

            self.__name__ = module_name
            self.__values__: Dict[str, Any] = {}
            self.__source__: Dict[str, str] = {}

            for conf in defaults + (sysdefaults,):
                self._load(conf)

            if sysdefaults.DEBUG_MODULE_CONFIG in (DEBUG_ALL_CONFIG_VALUE, module_name):
                logging.debug("=== START MODULE CONFIG [%s] ===", module_name)
                for key, value in self.__values__.items():
                    logging.debug(" - [%s] %r <= %s", key, value, self.__source__[key])
                logging.debug("=/=  END MODULE CONFIG [%s]  =/=", module_name)

        def _load(self, conf):
            if conf is None:
                return

            items = conf.items() if isinstance(conf, ModuleConfig) else vars(conf).items()
            source = getattr(conf, '__name__', '<defaults>')
            for key, default in items:
                if not key.isupper() or key in self.__values__:
                    continue

                try:
                    self.__values__[key] = _parse_value(__parser__, self.__name__, key, default)
                    self.__source__[key] = '|'.join(FREEFORM_CONFIG_FILES)
                except configparser.NoOptionError:
                    self.__values__[key] = default
                    self.__source__[key] = source

        def __getattr__(self, name):
            try:
                return self.__values__[name]
            except KeyError:
                raise AttributeError(f"Config [{self.__name__}] has no value [{name}]") from None

        def __getitem__(self, name):
            return self.__values__[name]

        def get(self, name, default=None):
            return self.__values__.get(name, default)

        def items(self):
            yield from self.__values__.items()

    def get_config(config_key: str, *defaults: Union[ModuleType, ModuleConfig]) -> ModuleConfig:
        if config_key not in __config__:
            __config__[config_key] = ModuleConfig(config_key, *defaults)

        return __config__[config_key]

    default_config = get_config(FREEFORM_SYSTEM_DEFAULTS, sysdefaults)
    return ModuleConfig, get_config, default_config


ModuleConfig, getConfig, default_config = __module_config__()

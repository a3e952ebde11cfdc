import copy
import pathlib
import typing

import cerberus
import mergedeep
from ruamel import yaml

import tgd
import tgd.core
import tgd.core.size

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

LOG_FORMATS = ["console", "json"]

SCHEMA = {
    "size": {
        "type": "dict",
        "schema": {
            "strategy": {
                "type": "string",
                "allowed": list(tgd.core.size.STRATEGIES),
            },
        },
    },
    "logging": {
        "type": "dict",
        "schema": {
            "level": {
                "type": "string",
                "allowed": LOG_LEVELS,
                "coerce": "upper",
            },
            "format": {
                "type": "string",
                "allowed": LOG_FORMATS,
            },
        },
    },
}

DEFAULTS = {
    "size": {
        "strategy": tgd.core.size.DEFAULT_STRATEGY,
    },
    "logging": {
        "level": "WARNING",
        "format": "console",
    },
}


class InvalidConfigurationError(tgd.core.Error):
    def __init__(self, errors):
        super().__init__("Configuration is invalid: {}".format(errors))
        self.errors = errors


class Validator(cerberus.Validator):
    @staticmethod
    def _normalize_coerce_upper(value):
        if isinstance(value, str):
            return value.upper()

        return value


def _plain(value):
    if isinstance(value, typing.Mapping):
        return {key: _plain(item) for (key, item) in value.items()}

    if isinstance(value, list):
        return list(map(_plain, value))

    return value


class Configuration:
    def __init__(self, data: typing.Optional[typing.Mapping[str, typing.Any]] = None):
        merged = mergedeep.merge(
            {},
            copy.deepcopy(DEFAULTS),
            _plain(data or {}),
        )

        validator = Validator(SCHEMA)
        if not validator.validate(merged):
            raise InvalidConfigurationError(validator.errors)

        self.__data = validator.document

    @property
    def data(self) -> typing.Dict[str, typing.Any]:
        return self.__data

    @property
    def size_strategy(self) -> str:
        return self.__data["size"]["strategy"]

    @property
    def log_level(self) -> str:
        return self.__data["logging"]["level"]

    @property
    def log_format(self) -> str:
        return self.__data["logging"]["format"]

    def dump(self, stream):
        yaml.YAML().dump(self.__data, stream)


def load(path: typing.Optional[typing.Union[str, pathlib.Path]] = None) -> "Configuration":
    if path is None:
        return Configuration()

    path = pathlib.Path(path)

    try:
        data = yaml.YAML().load(path)
    except yaml.YAMLError as error:
        raise InvalidConfigurationError({str(path): [str(error)]}) from error

    if data is None:
        data = {}
    elif not isinstance(data, typing.Mapping):
        raise InvalidConfigurationError({str(path): ["must be a mapping"]})

    return Configuration(data)

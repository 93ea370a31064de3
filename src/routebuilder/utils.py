from __future__ import annotations

import base64
import os
from copy import deepcopy
from dataclasses import dataclass, fields
from typing import TypeVar

import tomli


# GenericConf class for typing only
@dataclass
class GenericConf:
    pass


T = TypeVar("T", bound=GenericConf)
U = TypeVar("U")


def defaults_from_type(defaults: type[T], conf: dict | None) -> T:
    """
    Creates an instance of the dataclass with the values of conf. Missing keys
    get the default value of the dataclass, unknown keys raise a KeyError.
    """

    if conf is None:
        return defaults()

    conf_copy = deepcopy(conf)
    field_names = [f.name for f in fields(defaults)]
    for key in conf_copy.keys():
        if key not in field_names:
            raise KeyError(f"{key}")

    return defaults(**conf_copy)


def read_config_file(file_name: str) -> dict:
    config_path = os.path.expanduser(file_name)

    if not os.path.exists(config_path):
        raise FileExistsError(f"Config file '{file_name}' does not exist")

    with open(config_path, "rb") as config_file:
        res = tomli.load(config_file)

    return res


def first_some(value1: U | None, value2: U) -> U:
    """Returns the first value which is not None"""

    return value1 if value1 is not None else value2


def bytes_to_str(bytes: bytes) -> str:
    return base64.b16encode(bytes).decode("utf-8").lower()


def str_to_bytes(hex_str: str) -> bytes:
    """Inverse of bytes_to_str. Accepts upper and lower case hex digits."""

    return base64.b16decode(hex_str.upper())

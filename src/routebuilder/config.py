from __future__ import annotations

import os
from dataclasses import dataclass

from .utils import GenericConf, defaults_from_type, read_config_file, str_to_bytes

DEFAULT_OUTPUT_FILE = "output.csv"


@dataclass
class BuilderConf(GenericConf):
    output_file: str = DEFAULT_OUTPUT_FILE
    parallel: bool = False


@dataclass
class PaymentConf(GenericConf):
    """
    Values used instead of the ones of the payment request. If all of them
    are set, the payment request is not decoded at all.
    """

    amount_msat: int | None = None
    min_final_cltv_delta: int | None = None
    # hex encoded, 32 bytes
    payment_secret: str | None = None

    def is_complete(self) -> bool:
        return (
            self.amount_msat is not None
            and self.min_final_cltv_delta is not None
            and self.payment_secret is not None
        )

    def payment_secret_bytes(self) -> bytes | None:
        if self.payment_secret is None:
            return None
        return str_to_bytes(self.payment_secret)


class RouteBuilderConfig:
    def __init__(self, config_dict: dict):

        self.log_file: str | None = None
        self.log_level: str | None = None
        if (logging := config_dict.get("logging")) is not None:
            if (logfile := logging.get("logfile")) is not None:
                self.log_file = os.path.expanduser(str(logfile))
            if (loglevel := logging.get("level")) is not None:
                self.log_level = str(loglevel)

        try:
            self.builder = defaults_from_type(
                BuilderConf, config_dict.get("routebuilder")
            )
        except KeyError as e:
            raise ValueError(f"Unknown key in 'routebuilder' section: {e}")

        try:
            self.payment = defaults_from_type(PaymentConf, config_dict.get("payment"))
        except KeyError as e:
            raise ValueError(f"Unknown key in 'payment' section: {e}")

        self._check_types()

    def _check_types(self) -> None:
        if not isinstance(self.builder.parallel, bool):
            raise ValueError(f"Cannot parse 'parallel': {self.builder.parallel!r}")

        for name in ("amount_msat", "min_final_cltv_delta"):
            value = getattr(self.payment, name)
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, int)
            ):
                raise ValueError(f"Cannot parse '{name}': {value!r}")

        try:
            self.payment.payment_secret_bytes()
        except Exception as e:
            raise ValueError(f"Cannot parse 'payment_secret': {e}")

    @classmethod
    def from_config_file(cls, file_name: str | None) -> RouteBuilderConfig:
        """
        Reads the config from a toml file. Without a file name all defaults
        are used.
        """

        if file_name is None:
            return cls({})
        return cls(read_config_file(file_name))

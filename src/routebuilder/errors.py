from __future__ import annotations


class RouteBuilderError(Exception):
    """Base class of all errors raised by routebuilder."""


class InvalidHopError(RouteBuilderError): ...


class InvalidPathId(RouteBuilderError): ...


class SecretLengthMismatch(RouteBuilderError): ...


class ArithmeticOverflow(RouteBuilderError): ...


class TlvDecodeError(RouteBuilderError): ...


class InputFormatError(RouteBuilderError): ...


class PaymentRequestError(RouteBuilderError): ...


class InvalidBlockHeight(RouteBuilderError): ...

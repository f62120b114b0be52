import argparse
from dataclasses import dataclass

DEFAULT_BIND = ":8080"


@dataclass(frozen=True)
class BindAddress:
    host: str
    port: int

    @classmethod
    def parse(cls, value: str) -> "BindAddress":
        """Parse ``:PORT``, ``HOST:PORT`` or ``[V6HOST]:PORT``."""
        host, sep, port = value.rpartition(":")
        if not sep:
            raise ValueError(f"missing port in address {value!r}")
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        elif ":" in host:
            raise ValueError(f"too many colons in address {value!r}")
        try:
            port_num = int(port)
        except ValueError:
            raise ValueError(f"invalid port {port!r} in address {value!r}") from None
        if not 0 <= port_num <= 65535:
            raise ValueError(f"port out of range in address {value!r}")
        return cls(host=host or "0.0.0.0", port=port_num)


def _bind_arg(value: str) -> BindAddress:
    try:
        return BindAddress.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="latencytest")
    parser.add_argument(
        "-bind", default=DEFAULT_BIND, type=_bind_arg,
        help="The socket to bind to.",
    )
    return parser.parse_args(argv)

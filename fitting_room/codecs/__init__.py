"""
Serialization formats shared by the fitting room services.
"""

from fitting_room.codecs.data_url import (
    DataUrlParts,
    decode_data_url,
    format_data_url,
    parse_data_url,
)

__all__ = ["DataUrlParts", "decode_data_url", "format_data_url", "parse_data_url"]

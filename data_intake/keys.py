from typing import Optional

from . import config


def generate_key(hash_value: str, extension: Optional[str] = None) -> str:
    """
    Builds a bucketed object-store key from a content hash.

        generate_key('9a0364b9e99b...', 'png') -> '9a/03/9a0364b9e99b....png'

    The two leading directories spread objects across 65536 buckets.
    """
    if len(hash_value) < config.MINIMUM_HASH_LENGTH:
        raise ValueError(f'The hash "{hash_value}" must be {config.MINIMUM_HASH_LENGTH} or more characters.')

    basename = f"{hash_value}.{extension}" if extension else hash_value
    return f"{hash_value[0:2]}/{hash_value[2:4]}/{basename}"

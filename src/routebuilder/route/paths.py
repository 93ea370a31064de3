from __future__ import annotations

from collections.abc import Sequence

from routebuilder.errors import InvalidPathId
from routebuilder.log import getLogger

from .models import Hop, Path

# Upper bound for the number of paths of one payment. Larger path ids would
# allocate one bucket per id.
MAX_PATHS = 65_536

logger = getLogger(__name__)


def count_paths(hops: Sequence[Hop]) -> int:
    """
    Returns the number of path buckets, i.e. the maximum path_id plus one.
    An empty input has no paths.
    """

    if len(hops) == 0:
        return 0

    return max(hop.path_id for hop in hops) + 1


def group_by_path(hops: Sequence[Hop]) -> list[Path]:
    """
    Partitions the hops into paths. The result has one entry for each path_id
    in 0..max(path_id), the hops keep their relative input order. Ids without
    any hop result in an empty path.
    """

    num_paths = count_paths(hops)
    if num_paths > MAX_PATHS:
        raise InvalidPathId(
            f"path_id {num_paths - 1} exceeds the maximum path_id {MAX_PATHS - 1}"
        )

    buckets: list[list[Hop]] = [[] for _ in range(num_paths)]

    for hop in hops:
        if not 0 <= hop.path_id < num_paths:
            raise InvalidPathId(
                f"path_id {hop.path_id} of channel {hop.channel_name!r} not in "
                f"range 0..{num_paths - 1}"
            )
        buckets[hop.path_id].append(hop)

    paths = [Path(path_id, tuple(bucket)) for path_id, bucket in enumerate(buckets)]

    for path in paths:
        names = [hop.channel_name for hop in path.hops]
        if len(set(names)) != len(names):
            logger.warning(
                f"path {path.path_id} uses a channel name more than once: {names}"
            )

    logger.debug(
        f"grouped {len(hops)} hops into {num_paths} paths; "
        f"empty paths: {[p.path_id for p in paths if p.is_empty()]}"
    )
    return paths

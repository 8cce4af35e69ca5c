"""Block-subsidy schedule: circulating supply, halvings and difficulty retargets."""

DEFAULT_RETARGET_INTERVAL = 2016


def circulating_supply(height: int, halving_interval: int, initial_subsidy: float) -> float:
    """
    Coins issued by block subsidies for a chain with ``height`` mined blocks.

    Blocks ``0 .. height - 1`` are summed epoch by epoch, each epoch paying
    ``initial_subsidy / 2**epoch`` per block. An epoch spans
    ``[epoch * interval, (epoch + 1) * interval - 1]``.

    Parameters
    ----------
    height : int
        Number of mined blocks as reported by the node
    halving_interval : int
        Blocks between halvings
    initial_subsidy : float
        Subsidy of the first epoch

    Returns
    -------
    float
        Circulating supply in whole coins (0 for non-positive heights)

    Examples
    --------
    >>> circulating_supply(209999, 210000, 50.0)
    10499950.0

    """
    if height <= 0 or halving_interval <= 0:
        return 0.0

    last_height = height - 1
    halvings = last_height // halving_interval
    supply = 0.0

    for epoch in range(halvings + 1):
        subsidy = initial_subsidy / 2**epoch
        start = epoch * halving_interval
        end = min((epoch + 1) * halving_interval - 1, last_height)
        supply += (end - start + 1) * subsidy

    return supply


def closed_form_supply(height: int, halving_interval: int, initial_subsidy: float) -> float:
    """Geometric-series form of :func:`circulating_supply`."""
    if height <= 0 or halving_interval <= 0:
        return 0.0

    full_epochs, remainder = divmod(height, halving_interval)
    completed = halving_interval * initial_subsidy * 2 * (1 - 0.5**full_epochs)
    return completed + remainder * initial_subsidy / 2**full_epochs


def current_subsidy(height: int, halving_interval: int, initial_subsidy: float) -> float:
    """Subsidy paid by the epoch containing the last mined block."""
    if height <= 0 or halving_interval <= 0:
        return initial_subsidy
    return initial_subsidy / 2 ** ((height - 1) // halving_interval)


def next_halving(height: int, halving_interval: int) -> tuple[int, int]:
    """
    Next halving block and the blocks remaining until it.

    Parameters
    ----------
    height : int
        Current block height
    halving_interval : int
        Blocks between halvings

    Returns
    -------
    tuple[int, int]
        ``(next_halving_block, blocks_remaining)``

    """
    block = (max(height, 0) // halving_interval + 1) * halving_interval
    return block, block - height


def blocks_until_retarget(height: int, interval: int = DEFAULT_RETARGET_INTERVAL) -> int:
    """Blocks until the next difficulty adjustment boundary."""
    return interval - (max(height, 0) % interval)

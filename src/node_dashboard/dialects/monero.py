"""Handler for Monero daemon (monerod) RPC nodes."""

from node_dashboard.core.models import RpcCall, RpcDialect, SectionName
from node_dashboard.core.registry import DialectRegistry
from node_dashboard.dialects.base import BaseDialectHandler, Deriver
from node_dashboard.metrics import (
    Payload,
    atomic_to_coin,
    difficulty_to_hashrate,
    format_bytes,
    format_coin,
    format_count,
    format_disk_size,
    format_hashrate,
    format_yes_no,
    monero_fee_tiers,
)

GET_INFO = RpcCall(method="get_info")
GET_BLOCK_COUNT = RpcCall(method="get_block_count")
GET_LAST_BLOCK_HEADER = RpcCall(method="get_last_block_header")
GET_POOL_STATS = RpcCall(method="get_transaction_pool_stats")
GET_MINER_DATA = RpcCall(method="get_miner_data")
GET_FEE_ESTIMATE = RpcCall(method="get_fee_estimate")

FEE_LABELS = {"fast": "Fast", "medium": "Medium", "slow": "Slow", "slowest": "Slowest"}


@DialectRegistry.register
class MoneroHandler(BaseDialectHandler):
    """
    Handler for monerod, whose RPC mixes JSON-RPC methods with bare endpoints.

    Monero has a tail emission instead of halvings, so supply comes from the
    node (``already_generated_coins``) and hash rate is estimated from
    difficulty over the target block time.

    """

    dialect = RpcDialect.MONERO

    def calls_for(self, section: SectionName) -> list[RpcCall]:
        """RPC calls a section needs."""
        return {
            SectionName.NODE_INFO: [GET_INFO],
            SectionName.BLOCKCHAIN: [GET_BLOCK_COUNT, GET_LAST_BLOCK_HEADER, GET_INFO],
            SectionName.MEMPOOL: [GET_POOL_STATS],
            SectionName.MINING: [GET_INFO],
            SectionName.TRANSACTIONS: [GET_INFO, GET_MINER_DATA],
            SectionName.FEES: [GET_FEE_ESTIMATE],
        }[section]

    def labels_for(self, section: SectionName) -> list[str]:
        """Display labels of a section."""
        return {
            SectionName.NODE_INFO: ["Node Version", "Network", "Connections"],
            SectionName.BLOCKCHAIN: ["Block Height", "Synchronized", "Chain Size", "Last Block Reward"],
            SectionName.MEMPOOL: ["Transactions", "Size", "Total Fees"],
            SectionName.MINING: ["Difficulty", "Hashrate", "Block Height"],
            SectionName.TRANSACTIONS: ["Total Transactions", "Pool Transactions", "Circulating Supply"],
            SectionName.FEES: list(FEE_LABELS.values()),
        }[section]

    def derivers(self) -> dict[SectionName, Deriver]:
        """Section derivation functions."""
        return {
            SectionName.NODE_INFO: self._node_info,
            SectionName.BLOCKCHAIN: self._blockchain,
            SectionName.MEMPOOL: self._mempool,
            SectionName.MINING: self._mining,
            SectionName.TRANSACTIONS: self._transactions,
            SectionName.FEES: self._fees,
        }

    def _coins(self, amount: float | None) -> float:
        return atomic_to_coin(amount, self.profile.atomic_units)

    def _node_info(self, payloads: list[Payload]) -> dict[str, str]:
        (info,) = payloads
        connections = info.get_int("incoming_connections_count") + info.get_int("outgoing_connections_count")
        return {
            "Node Version": info.get_str("version"),
            "Network": info.get_str("nettype"),
            "Connections": str(connections),
        }

    def _blockchain(self, payloads: list[Payload]) -> dict[str, str]:
        count, last_header, info = payloads
        reward = self._coins(last_header.child("block_header").get_int("reward"))
        return {
            "Block Height": format_count(count.get_int("count")),
            "Synchronized": format_yes_no(info.get_bool("synchronized") if info.has("synchronized") else None),
            "Chain Size": format_disk_size(info.get_int("database_size")),
            "Last Block Reward": f"{format_coin(reward, 6)} {self.profile.unit}",
        }

    def _mempool(self, payloads: list[Payload]) -> dict[str, str]:
        (response,) = payloads
        stats = response.child("pool_stats")
        fee_total = stats.get_int("fee_total", None)
        if fee_total is None:
            fee_total = response.get_int("fee_total")
        return {
            "Transactions": format_count(stats.get_int("txs_total")),
            "Size": format_bytes(stats.get_int("bytes_total")),
            "Total Fees": f"{format_coin(self._coins(fee_total), 6)} {self.profile.unit}",
        }

    def _mining(self, payloads: list[Payload]) -> dict[str, str]:
        (info,) = payloads
        difficulty = info.get_float("difficulty")
        return {
            "Difficulty": format_count(difficulty),
            "Hashrate": format_hashrate(difficulty_to_hashrate(difficulty, self.profile.block_time)),
            "Block Height": format_count(info.get_int("height")),
        }

    def _transactions(self, payloads: list[Payload]) -> dict[str, str]:
        info, miner_data = payloads
        supply = self._coins(_as_number(miner_data.get("already_generated_coins")))
        return {
            "Total Transactions": format_count(info.get_int("tx_count")),
            "Pool Transactions": format_count(info.get_int("tx_pool_size")),
            "Circulating Supply": f"{format_count(supply)} {self.profile.unit}",
        }

    def _fees(self, payloads: list[Payload]) -> dict[str, str]:
        (estimate,) = payloads
        tiers = monero_fee_tiers(estimate.get_list("fees"), self.profile.atomic_units)
        unit = self.profile.unit
        return {label: f"{tiers[tier]} {unit}" for tier, label in FEE_LABELS.items()}


def _as_number(value: object) -> float | None:
    # monerod may report very large amounts as decimal strings
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return value if isinstance(value, int | float) and not isinstance(value, bool) else None

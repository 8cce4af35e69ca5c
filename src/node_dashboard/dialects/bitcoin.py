"""Handler for bitcoind-style JSON-RPC nodes (Bitcoin, Litecoin)."""

from node_dashboard.core.models import RpcCall, RpcDialect, SectionName
from node_dashboard.core.registry import DialectRegistry
from node_dashboard.dialects.base import BaseDialectHandler, Deriver
from node_dashboard.metrics import (
    Payload,
    blocks_until_retarget,
    circulating_supply,
    current_subsidy,
    feerate_to_vbyte,
    format_bytes,
    format_count,
    format_decimal,
    format_disk_size,
    format_hashrate,
    format_sync_progress,
    next_halving,
)
from node_dashboard.metrics.supply import DEFAULT_RETARGET_INTERVAL

BLOCKCHAIN_INFO = RpcCall(method="getblockchaininfo")
NETWORK_INFO = RpcCall(method="getnetworkinfo")
MEMPOOL_INFO = RpcCall(method="getmempoolinfo")
MINING_INFO = RpcCall(method="getmininginfo")
CHAIN_TX_STATS = RpcCall(method="getchaintxstats")

# estimatesmartfee confirmation targets in blocks
FEE_TARGETS = {"Fast": 1, "Medium": 6, "Slow": 144}


@DialectRegistry.register
class BitcoinHandler(BaseDialectHandler):
    """
    Handler for nodes speaking the bitcoind JSON-RPC interface.

    Serves every chain whose profile uses the ``json_rpc`` dialect; the
    halving interval, subsidy and unit labels come from the profile.

    """

    dialect = RpcDialect.JSON_RPC
    partial_sections = frozenset({SectionName.FEES})

    def calls_for(self, section: SectionName) -> list[RpcCall]:
        """RPC calls a section needs."""
        return {
            SectionName.NODE_INFO: [NETWORK_INFO, BLOCKCHAIN_INFO],
            SectionName.BLOCKCHAIN: [BLOCKCHAIN_INFO],
            SectionName.MEMPOOL: [MEMPOOL_INFO],
            SectionName.MINING: [MINING_INFO, BLOCKCHAIN_INFO],
            SectionName.TRANSACTIONS: [CHAIN_TX_STATS],
            SectionName.FEES: [RpcCall(method="estimatesmartfee", params=[target]) for target in FEE_TARGETS.values()],
        }[section]

    def labels_for(self, section: SectionName) -> list[str]:
        """Display labels of a section."""
        return {
            SectionName.NODE_INFO: ["Node Version", "Chain", "Pruned", "Connections"],
            SectionName.BLOCKCHAIN: ["Block Height", "Header Height", "Sync Progress", "Chain Size"],
            SectionName.MEMPOOL: ["Transactions", "Size", "Total Fees"],
            SectionName.MINING: [
                "Difficulty",
                "Hashrate",
                "Circulating Supply",
                "Block Subsidy",
                "Blocks Until Halving",
                "Next Halving Block",
                "Blocks Until Retarget",
            ],
            SectionName.TRANSACTIONS: ["Total Transactions", "Average TPS", "Transactions (30 days)"],
            SectionName.FEES: list(FEE_TARGETS),
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

    def _node_info(self, payloads: list[Payload]) -> dict[str, str]:
        network, chain = payloads
        return {
            "Node Version": network.get_str("subversion"),
            "Chain": chain.get_str("chain"),
            "Pruned": "true" if chain.get_bool("pruned") else "false",
            "Connections": str(network.get_int("connections")),
        }

    def _blockchain(self, payloads: list[Payload]) -> dict[str, str]:
        (chain,) = payloads
        return {
            "Block Height": format_count(chain.get_int("blocks")),
            "Header Height": format_count(chain.get_int("headers")),
            "Sync Progress": format_sync_progress(chain.get_float("verificationprogress", None)),
            "Chain Size": format_disk_size(chain.get_int("size_on_disk")),
        }

    def _mempool(self, payloads: list[Payload]) -> dict[str, str]:
        (mempool,) = payloads
        return {
            "Transactions": format_count(mempool.get_int("size")),
            "Size": format_bytes(mempool.get_int("bytes")),
            "Total Fees": f"{format_decimal(mempool.get_float('total_fee'), 8)} {self.profile.unit}",
        }

    def _mining(self, payloads: list[Payload]) -> dict[str, str]:
        mining, chain = payloads
        unit = self.profile.unit
        height = chain.get_int("blocks")
        values = {
            "Difficulty": format_count(chain.get_float("difficulty")),
            "Hashrate": format_hashrate(mining.get_float("networkhashps")),
        }

        if self.profile.has_halving:
            interval = self.profile.halving_interval
            initial = self.profile.initial_subsidy
            halving_block, remaining = next_halving(height, interval)
            subsidy = current_subsidy(height, interval, initial)
            values.update(
                {
                    "Circulating Supply": f"{format_count(circulating_supply(height, interval, initial))} {unit}",
                    "Block Subsidy": f"{subsidy:g} {unit}",
                    "Blocks Until Halving": format_count(remaining),
                    "Next Halving Block": format_count(halving_block),
                }
            )

        retarget = self.profile.retarget_interval or DEFAULT_RETARGET_INTERVAL
        values["Blocks Until Retarget"] = format_count(blocks_until_retarget(height, retarget))
        return values

    def _transactions(self, payloads: list[Payload]) -> dict[str, str]:
        (stats,) = payloads
        return {
            "Total Transactions": format_count(stats.get_int("txcount")),
            "Average TPS": format_decimal(stats.get_float("txrate")),
            "Transactions (30 days)": format_count(stats.get_int("window_tx_count")),
        }

    def _fees(self, payloads: list[Payload]) -> dict[str, str]:
        label = self.profile.fee_rate_label
        values = {}
        for name, estimate in zip(FEE_TARGETS, payloads, strict=True):
            rate = feerate_to_vbyte(estimate.get_float("feerate", None), self.profile.atomic_units)
            values[name] = f"{rate} {label}" if isinstance(rate, int) else rate
        return values

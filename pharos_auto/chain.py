# pharos_auto/chain.py
from fractions import Fraction
from web3 import Web3
from web3.types import TxParams

from .config import PHAROS_RPC, WETH_ADDRESS, RPC_TIMEOUT, RECEIPT_TIMEOUT, SEND_GAS_LIMIT
from .errors import ChainError
from .models import Account
from .util import get_logger, make_account, weth_abi, fmt_amount, short

log = get_logger()


def get_w3(rpc: str = PHAROS_RPC) -> Web3:
    assert rpc, "PHAROS_RPC required (.env)"
    w3 = Web3(Web3.HTTPProvider(rpc, request_kwargs={"timeout": RPC_TIMEOUT}))
    assert w3.is_connected(), f"RPC not connected: {rpc}"
    return w3


def scale_gas_price(gas_price: int, multiplier: float) -> int:
    # truncates toward zero, like integer wei math does
    return int(Fraction(int(gas_price)) * Fraction(str(multiplier)))


class ChainClient:
    """Native balance, gas price and the wrapped-token contract over one RPC connection."""

    def __init__(self, w3: Web3, weth_address: str = WETH_ADDRESS, receipt_timeout: int = RECEIPT_TIMEOUT):
        self.w3 = w3
        self.weth = w3.eth.contract(address=Web3.to_checksum_address(weth_address), abi=weth_abi())
        self.receipt_timeout = receipt_timeout

    # ---- reads ----

    def get_balance(self, address: str) -> int:
        return int(self.w3.eth.get_balance(Web3.to_checksum_address(address)))

    def wrapped_balance(self, address: str) -> int:
        return int(self.weth.functions.balanceOf(Web3.to_checksum_address(address)).call())

    def gas_price(self, multiplier: float = 1.0) -> int:
        try:
            raw = self.w3.eth.gas_price
        except Exception as e:
            log.error(f"gas price fetch failed: {e}")
            raise
        price = scale_gas_price(raw, multiplier)
        log.debug(f"gas price {fmt_amount(price, 9)} gwei (x{multiplier})")
        return price

    # ---- writes ----

    def wrap(self, account: Account, amount_wei: int, multiplier: float) -> str:
        fn = self.weth.functions.deposit()
        return self._send_contract_call(account, fn, multiplier, value=int(amount_wei))

    def unwrap(self, account: Account, amount_wei: int, multiplier: float) -> str:
        fn = self.weth.functions.withdraw(int(amount_wei))
        return self._send_contract_call(account, fn, multiplier)

    def send_native(self, account: Account, to: str, amount_wei: int, multiplier: float,
                    gas_limit: int = SEND_GAS_LIMIT) -> str:
        tx: TxParams = {
            "from": Web3.to_checksum_address(account.address),
            "to": Web3.to_checksum_address(to),
            "value": int(amount_wei),
            "gas": int(gas_limit),
            "gasPrice": self.gas_price(multiplier),
            "nonce": self._nonce(account.address),
            "chainId": self.w3.eth.chain_id,
        }
        log.debug(f"   gas limit {gas_limit:,}")
        return self._sign_and_wait(account, tx)

    # ---- internals ----

    def _nonce(self, address: str) -> int:
        return self.w3.eth.get_transaction_count(Web3.to_checksum_address(address), "pending")

    def _send_contract_call(self, account: Account, fn, multiplier: float, value: int = 0) -> str:
        sender = Web3.to_checksum_address(account.address)
        gas_price = self.gas_price(multiplier)
        params: TxParams = {"from": sender, "value": value}
        gas = fn.estimate_gas(params)
        log.info(f"   gas price {fmt_amount(gas_price, 9)} gwei, estimated gas {gas:,}")
        tx = fn.build_transaction({
            **params,
            "gas": int(gas),
            "gasPrice": gas_price,
            "nonce": self._nonce(sender),
        })
        return self._sign_and_wait(account, tx)

    def _sign_and_wait(self, account: Account, tx: TxParams) -> str:
        signed = make_account(account.private_key).sign_transaction(tx)
        txh = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash = Web3.to_hex(txh)
        rec = self.w3.eth.wait_for_transaction_receipt(txh, timeout=self.receipt_timeout)
        if int(rec["status"]) != 1:
            raise ChainError(f"transaction reverted: {short(tx_hash)}", tx_hash=tx_hash)
        return tx_hash

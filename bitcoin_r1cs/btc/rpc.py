import logging
import decimal
import json
import typing
import urllib.parse
from decimal import Decimal

from bitcointx.core import CTransaction
import requests


logger = logging.getLogger(__name__)

CHAIN_PARAMS_BY_NODE_CHAIN = {
    'regtest': 'bitcoin/regtest',
    'test': 'bitcoin/testnet',
    'signet': 'bitcoin/signet',
    'main': 'bitcoin/mainnet',
}


class JSONRPCError(requests.HTTPError):
    def __init__(self, *, message, code=None, request=None, response=None, jsonrpc_data=None):
        self.code = code
        self.message = message
        super().__init__(
            {
                "message": message,
                "code": code,
                "jsonrpc_data": jsonrpc_data,
            },
            request=request,
            response=response,
        )


class BitcoinRPC:
    """Requests-based JSON-RPC client for fetching transactions from a bitcoin node"""
    url: str

    def __init__(self, url: str):
        self._id_count = 0
        self.url = url

        urlparts = urllib.parse.urlparse(url)
        self._auth = (urlparts.username, urlparts.password) if (urlparts.username or urlparts.password) else None
        if urlparts.port:
            netloc = f"{urlparts.hostname}:{urlparts.port}"
        else:
            netloc = urlparts.hostname
        self._url = urllib.parse.urlunparse(
            urllib.parse.ParseResult(
                scheme=urlparts.scheme,
                netloc=netloc,
                path=urlparts.path,
                params=urlparts.params,
                query=urlparts.query,
                fragment=urlparts.fragment,
            )
        )

    def call(self, service_name: str, *args: typing.Any):
        return self._jsonrpc_call(service_name, args)

    def _jsonrpc_call(self, method, params):
        self._id_count += 1

        jsonrpc_data = {
            "jsonrpc": "2.0",
            "id": self._id_count,
            "method": method,
            "params": params,
        }
        postdata = json.dumps(
            jsonrpc_data,
            cls=DecimalJSONEncoder,
        )
        response = requests.post(
            self._url,
            data=postdata,
            auth=self._auth,
            headers={
                "Content-Type": "application/json",
            },
        )

        # Not raise_for_status: the node puts the useful message in the JSON body
        try:
            response_json = json.loads(
                response.text,
                parse_float=Decimal,
            )
        except json.JSONDecodeError as e:
            raise JSONRPCError(
                message=str(e),
                response=response,
                jsonrpc_data=jsonrpc_data,
            ) from e
        error = response_json.get("error")
        if error is not None or not response.ok:
            if isinstance(error, dict):
                raise JSONRPCError(
                    message=error["message"],
                    code=error["code"],
                    response=response,
                    jsonrpc_data=jsonrpc_data,
                )
            raise JSONRPCError(
                message=str(error),
                response=response,
                jsonrpc_data=jsonrpc_data,
            )
        if "result" not in response_json:
            raise JSONRPCError(
                message="No result in response",
                response=response,
                jsonrpc_data=jsonrpc_data,
            )
        return response_json["result"]

    def get_chain_params_name(self) -> str:
        """Name of the bitcointx ChainParams matching the node's chain"""
        chain = self.call('getblockchaininfo')['chain']
        try:
            return CHAIN_PARAMS_BY_NODE_CHAIN[chain]
        except KeyError:
            raise ValueError(f"Unknown chain {chain}") from None

    def get_raw_transaction(self, txid: str) -> CTransaction:
        """Fetch a transaction by txid. Needs -txindex on the node unless the tx is in the mempool or a wallet"""
        tx_hex = self.call("getrawtransaction", txid)
        logger.debug("getrawtransaction %s: %d bytes", txid, len(tx_hex) // 2)
        return CTransaction.deserialize(bytes.fromhex(tx_hex))


class DecimalJSONEncoder(json.JSONEncoder):
    # f'{somedecimal:.08f}' does not round-trip through json on every python version
    def default(self, o: typing.Any) -> typing.Any:
        if isinstance(o, decimal.Decimal):
            r = float(o)
            if f"{r:.08f}" != f"{o:.8f}":
                raise TypeError(
                    f"value {o!r} lost precision beyond acceptable range "
                    f"when converted to float: {r:.08f} != {o:.8f}"
                )
            return r
        return super().default(o)

"""
Shared constants and JSON-RPC response builders for the tests.
"""
import pycspr

TEST_NODE_URL = "http://node.example.com:7777/rpc"
TEST_SPECULATIVE_URL = "http://node.example.com:7778/rpc"
TEST_CHAIN_NAME = "casper-test"
TEST_CONTRACT_HASH = "hash-" + "ab" * 32
TEST_PACKAGE_HASH = "hash-" + "cd" * 32
TEST_STATE_ROOT_HASH = "ef" * 32


def rpc_result(result):
    """JSON-RPC success envelope"""
    return {"jsonrpc": "2.0", "id": 1, "result": result}


def rpc_error(code, message, data=None):
    return {"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message, "data": data}}


def block_result(state_root_hash=TEST_STATE_ROOT_HASH, block_hash="aa" * 32, era_id=42):
    return rpc_result({
        "api_version": "1.5.6",
        "block": {
            "hash": block_hash,
            "header": {"state_root_hash": state_root_hash, "era_id": era_id, "height": 100},
            "body": {},
        },
    })


def stored_value_result(cl_value):
    """`state_get_item` / `state_get_dictionary_item` result holding a CLValue"""
    return rpc_result({"api_version": "1.5.6", "stored_value": {"CLValue": pycspr.to_json(cl_value)}})


def deploy_info_result(deploy_hash, execution_results=()):
    return rpc_result({
        "api_version": "1.5.6",
        "deploy": {"hash": deploy_hash},
        "execution_results": list(execution_results),
    })


def success_entry(block_hash="bb" * 32):
    return {"block_hash": block_hash, "result": {"Success": {"cost": "100", "effect": {}, "transfers": []}}}


def failure_entry(error_message, block_hash="bb" * 32):
    return {"block_hash": block_hash, "result": {"Failure": {"cost": "100", "error_message": error_message}}}

"""
Commit and reveal buffers of the entry and chain built by ``factories``.
"""

CHAIN_COMMIT = (
    "000162a772f640448ee02e500a8e539bcf5c02e53f8b88fc1f81f0a87d0f18af94ab9384992b5c9db26ac6b2"
    "0aba137815efc39cf19cee53de0baccc54ec4e6acc6b02ffe4b936b56a6bbae773f5b51001161efdeb0ba1e8"
    "447f3c45206119b40539e4325cc5be0b5d54e4b02234a10b542573645f7ba55650f25eb931985cddcf451df7"
    "7594b5b6a523cd0ebb71b13ec133eeb93c084958f1ed6adef51ec9ec6323c543f91303739c9e5194972c5105"
    "929b7787d327755ab1b5cf1b2884d4877b8fdcbca1cfb00b"
)
CHAIN_REVEAL = (
    "00fcfe632c6ab1a7c71448e256e0487c4cfc34ceac90e997de8c4fdf8485e9a0fd"
    "001900176d79206578742069642031373834343635353737373935"
)
ENTRY_COMMIT = (
    "000162a2e0a0c8be705a58aea4230e99881f625e74cd085b6ef455b94ff144249b9a2f425e8f96015d54e4b0"
    "2234a10b542573645f7ba55650f25eb931985cddcf451df77594b5b62a7642156b5cf73ecd0b54b803922c53"
    "65d58c372d33353995a1ef5b2ef889bdcd19a3101456379cc339642de1d623f6cade5af10addbcdd589d30e8"
    "bfe78702"
)
ENTRY_REVEAL = (
    "00954d5a49fd70d9b8bcdb35d252267829957f7ef7fa6c74f88419bdc5e82209f4"
    "00060004746573745061796c6f616448657265"
)

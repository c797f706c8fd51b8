"""Farm contract addresses and fixed protocol values."""

from typing import TypedDict


class FarmAddresses(TypedDict):
    token: str
    farm: str
    pair: str


# SEED/FTM spLP farm on Fantom opera
FANTOM_FARM_ADDRESSES: FarmAddresses = {
    "token": "0x23D50a056c5Dd62073600e1daDcE73D454Cfd391",
    "farm": "0x9C09E8307dB9D20B836Cb2bBF84D3BD503D61ee5",
    "pair": "0x23D50a056c5Dd62073600e1daDcE73D454Cfd391",
}

DEFAULT_FANTOM_RPC_URL = "https://rpc.ftm.tools"

TOKEN_DECIMALS = 18
ONE_TOKEN = 10**TOKEN_DECIMALS

# Allowance above which the farm counts as unlocked for staking
APPROVAL_THRESHOLD = 100 * ONE_TOKEN

# One-time approval granted to the farm so staking never needs re-approval
APPROVAL_AMOUNT = 1_000_000_000 * ONE_TOKEN

SECONDS_PER_WEEK = 604_800
POLL_INTERVAL_SECONDS = 5.0

# Fractional digits shown for each metric
BALANCE_DISPLAY_PLACES = 3
STAKE_DISPLAY_PLACES = 5
REWARD_DISPLAY_PLACES = 5
APR_DISPLAY_PLACES = 0
PRICE_DISPLAY_PLACES = 5

LP_SYMBOL = "SEED/FTM spLP"
REWARD_SYMBOL = "SEED"
QUOTE_SYMBOL = "FTM"

# Key of the persisted "previously connected" flag
SESSION_FLAG_KEY = "walletConnected"

from __future__ import annotations

# Minimal ABIs for the Aave V3 Pool, PoolDataProvider and ERC20 calls we make.


def _fn(name, inputs, outputs=(), mutability="nonpayable"):
    return {
        "name": name,
        "type": "function",
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


POOL_ABI = [
    _fn("supply", [("asset", "address"), ("amount", "uint256"), ("onBehalfOf", "address"), ("referralCode", "uint16")]),
    _fn("withdraw", [("asset", "address"), ("amount", "uint256"), ("to", "address")], [("", "uint256")]),
    _fn(
        "borrow",
        [
            ("asset", "address"),
            ("amount", "uint256"),
            ("interestRateMode", "uint256"),
            ("referralCode", "uint16"),
            ("onBehalfOf", "address"),
        ],
    ),
    _fn(
        "repay",
        [("asset", "address"), ("amount", "uint256"), ("interestRateMode", "uint256"), ("onBehalfOf", "address")],
        [("", "uint256")],
    ),
    _fn("swapBorrowRateMode", [("asset", "address"), ("interestRateMode", "uint256")]),
    _fn("setUserUseReserveAsCollateral", [("asset", "address"), ("useAsCollateral", "bool")]),
    _fn("setUserEMode", [("categoryId", "uint8")]),
    _fn("getUserEMode", [("user", "address")], [("", "uint256")], "view"),
    _fn(
        "flashLoan",
        [
            ("receiverAddress", "address"),
            ("assets", "address[]"),
            ("amounts", "uint256[]"),
            ("interestRateModes", "uint256[]"),
            ("onBehalfOf", "address"),
            ("params", "bytes"),
            ("referralCode", "uint16"),
        ],
    ),
    _fn("FLASHLOAN_PREMIUM_TOTAL", [], [("", "uint128")], "view"),
    _fn(
        "getUserAccountData",
        [("user", "address")],
        [
            ("totalCollateralBase", "uint256"),
            ("totalDebtBase", "uint256"),
            ("availableBorrowsBase", "uint256"),
            ("currentLiquidationThreshold", "uint256"),
            ("ltv", "uint256"),
            ("healthFactor", "uint256"),
        ],
        "view",
    ),
]

POOL_DATA_PROVIDER_ABI = [
    _fn(
        "getUserReserveData",
        [("asset", "address"), ("user", "address")],
        [
            ("currentATokenBalance", "uint256"),
            ("currentStableDebt", "uint256"),
            ("currentVariableDebt", "uint256"),
            ("principalStableDebt", "uint256"),
            ("scaledVariableDebt", "uint256"),
            ("stableBorrowRate", "uint256"),
            ("liquidityRate", "uint256"),
            ("stableRateLastUpdated", "uint40"),
            ("usageAsCollateralEnabled", "bool"),
        ],
        "view",
    ),
    _fn(
        "getReserveData",
        [("asset", "address")],
        [
            ("unbacked", "uint256"),
            ("accruedToTreasuryScaled", "uint256"),
            ("totalAToken", "uint256"),
            ("totalStableDebt", "uint256"),
            ("totalVariableDebt", "uint256"),
            ("liquidityRate", "uint256"),
            ("variableBorrowRate", "uint256"),
            ("stableBorrowRate", "uint256"),
            ("averageStableBorrowRate", "uint256"),
            ("liquidityIndex", "uint256"),
            ("variableBorrowIndex", "uint256"),
            ("lastUpdateTimestamp", "uint40"),
        ],
        "view",
    ),
]

ERC20_ABI = [
    _fn("balanceOf", [("account", "address")], [("", "uint256")], "view"),
    _fn("decimals", [], [("", "uint8")], "view"),
    _fn("allowance", [("owner", "address"), ("spender", "address")], [("", "uint256")], "view"),
    _fn("approve", [("spender", "address"), ("amount", "uint256")], [("", "bool")]),
]

"""Extraction prompts for the Aave actions."""

_CONTEXT = """
## Position context
{{providers}}

## Recent messages
{{recentMessages}}
"""

_XML_FOOTER = "Respond with the XML block only. Do not add explanations."
_JSON_FOOTER = "Respond with the JSON object only. Do not add explanations."

SUPPLY_TEMPLATE = f"""Extract the supply request from the conversation below.

Example response:
<response>
    <asset>USDC</asset>
    <amount>100</amount>
    <enableCollateral>true</enableCollateral>
</response>
{_CONTEXT}
Fields:
- asset: the token to supply (e.g. USDC, WETH, DAI, cbETH)
- amount: the amount to supply, as a number
- enableCollateral: whether to use the supply as collateral (true/false, default true)

{_XML_FOOTER}"""

WITHDRAW_TEMPLATE = f"""Extract the withdrawal request from the conversation below.

Example response:
<response>
    <asset>USDC</asset>
    <amount>100</amount>
</response>
{_CONTEXT}
Fields:
- asset: the supplied token to withdraw (e.g. USDC, WETH, DAI)
- amount: the amount to withdraw as a number, or "max" to withdraw everything

{_XML_FOOTER}"""

BORROW_TEMPLATE = f"""Extract the borrow request from the conversation below.

Example response:
```json
{{"asset": "USDC", "amount": "500", "interestRateMode": "variable"}}
```
{_CONTEXT}
Fields:
- asset: the token to borrow (e.g. USDC, WETH, DAI)
- amount: the amount to borrow, as a number
- interestRateMode: "stable" or "variable" (default "variable")

{_JSON_FOOTER}"""

REPAY_TEMPLATE = f"""Extract the repayment request from the conversation below.

Example response:
<response>
    <asset>USDC</asset>
    <amount>100</amount>
    <rateMode>variable</rateMode>
</response>
{_CONTEXT}
Fields:
- asset: the borrowed token to repay (e.g. USDC, WETH, DAI)
- amount: the amount to repay as a number, or "max" to repay the full debt
- rateMode: "stable" or "variable" (default "variable")

{_XML_FOOTER}"""

EMODE_TEMPLATE = f"""Extract the efficiency mode (eMode) request from the conversation below.

Example response:
```json
{{"categoryId": 1, "enable": true}}
```
{_CONTEXT}
Fields:
- categoryId: 0 (disabled), 1 (stablecoins) or 2 (ETH correlated)
- enable: true to enable eMode, false to disable it (disabling sets categoryId to 0)

{_JSON_FOOTER}"""

RATE_SWITCH_TEMPLATE = f"""Extract the interest rate switch request from the conversation below.

Example response:
<response>
    <asset>USDC</asset>
    <targetRateMode>stable</targetRateMode>
</response>
{_CONTEXT}
Fields:
- asset: the borrowed token whose rate should change (e.g. USDC, DAI)
- targetRateMode: the desired rate mode, "stable" or "variable"

{_XML_FOOTER}"""

COLLATERAL_TEMPLATE = f"""Extract the collateral setting request from the conversation below.

Example response:
<response>
    <asset>WETH</asset>
    <enable>true</enable>
</response>
{_CONTEXT}
Fields:
- asset: the supplied token (e.g. USDC, WETH, DAI)
- enable: true to use it as collateral, false to stop using it as collateral

{_XML_FOOTER}"""

FLASH_LOAN_TEMPLATE = f"""Extract the flash loan request from the conversation below.

Example response:
```json
{{"assets": "USDC,WETH", "amounts": "1000,0.5", "receiverAddress": null, "params": ""}}
```
{_CONTEXT}
Fields:
- assets: comma separated token symbols
- amounts: comma separated amounts, one per asset and in the same order
- receiverAddress: the receiver contract address, or null to use the wallet
- params: hex encoded receiver params, or an empty string

{_JSON_FOOTER}"""

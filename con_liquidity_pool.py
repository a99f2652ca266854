I = importlib

metadata = Hash()
reserves = Hash(default_value=0) # cached snapshots: 'currency', 'token'
balances = Hash(default_value=0) # LP shares, plus (owner, spender) approvals
total_supply = Variable()

reentrancyGuardActive = Variable(default_value=False)

FEE_DENOMINATOR = 100
FEE_NUMERATOR = 1 # 1% of every inbound amount stays in the pool

# Standard XSC001 (Fungible Token) interface
token_interface = [
    I.Func('transfer_from', args=('amount', 'to', 'main_account')),
    I.Func('transfer', args=('amount', 'to')),
    I.Func('balance_of', args=('address',)),
]

# Events
LiquidityMinted = LogEvent(
    event="liquidity_minted",
    params={
        "caller": {'type':str, 'idx':True},
        "to": {'type':str, 'idx':True},
        "amount_currency": {'type':(int, float, decimal)},
        "amount_token": {'type':(int, float, decimal)}
    })

LiquidityBurned = LogEvent(
    event="liquidity_burned",
    params={
        "caller": {'type':str, 'idx':True},
        "to": {'type':str, 'idx':True},
        "amount_currency": {'type':(int, float, decimal)},
        "amount_token": {'type':(int, float, decimal)}
    })

Swapped = LogEvent(
    event="swapped",
    params={
        "caller": {'type':str, 'idx':True},
        "to": {'type':str, 'idx':True},
        "amount_currency_in": {'type':(int, float, decimal)},
        "amount_token_in": {'type':(int, float, decimal)},
        "amount_currency_out": {'type':(int, float, decimal)},
        "amount_token_out": {'type':(int, float, decimal)}
    })

ReservesUpdated = LogEvent(
    event="reserves_updated",
    params={
        "reserve_currency": {'type':(int, float, decimal)},
        "reserve_token": {'type':(int, float, decimal)}
    })

LPTransfer = LogEvent(
    event="transfer",
    params={
        "from": {'type':str, 'idx':True},
        "to": {'type':str, 'idx':True},
        "amount": {'type':(int, float, decimal)}
    })

@construct
def seed(token, currency):
    token_contract = I.import_module(token)
    assert I.enforce_interface(token_contract, token_interface), 'token contract not XSC001-compliant'
    currency_contract = I.import_module(currency)
    assert I.enforce_interface(currency_contract, token_interface), 'currency contract not XSC001-compliant'

    metadata['token'] = token
    metadata['currency'] = currency
    metadata['token_name'] = "NewCoin LP"
    metadata['token_symbol'] = "NEW-LP"
    reserves['currency'] = 0
    reserves['token'] = 0
    total_supply.set(0)
    reentrancyGuardActive.set(False)

def enter():
    assert not reentrancyGuardActive.get(), "Pool is busy, please try again."
    reentrancyGuardActive.set(True)

def leave():
    reentrancyGuardActive.set(False)

def live_balances():
    currency_balance = I.import_module(metadata['currency']).balance_of(address=ctx.this)
    token_balance = I.import_module(metadata['token']).balance_of(address=ctx.this)
    return currency_balance, token_balance

def update_reserves(currency_balance, token_balance):
    reserves['currency'] = currency_balance
    reserves['token'] = token_balance
    ReservesUpdated({"reserve_currency": currency_balance, "reserve_token": token_balance})

def sqrt(y):
    # Babylonian method, floors to the integer root
    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0

def mint_shares(to, amount):
    total_supply.set(total_supply.get() + amount)
    balances[to] += amount

def burn_shares(owner, amount):
    balances[owner] -= amount
    total_supply.set(total_supply.get() - amount)

@export
def get_reserves():
    return [reserves['currency'], reserves['token']]

@export
def sync():
    enter()
    currency_balance, token_balance = live_balances()
    update_reserves(currency_balance, token_balance)
    leave()

@export
def mint(to: str):
    enter()

    reserve_currency = reserves['currency']
    reserve_token = reserves['token']
    currency_balance, token_balance = live_balances()

    # What actually arrived, tax already taken out by the token
    amount_currency = currency_balance - reserve_currency
    amount_token = token_balance - reserve_token

    supply = total_supply.get()
    if supply == 0:
        liquidity = sqrt(amount_currency * amount_token)
        assert liquidity > 0, 'insufficient initial amounts'
    else:
        liquidity = min(
            amount_currency * supply // reserve_currency,
            amount_token * supply // reserve_token
        )
        assert liquidity > 0, 'insufficient amounts'

    mint_shares(to, liquidity)
    update_reserves(currency_balance, token_balance)

    LiquidityMinted({
        "caller": ctx.caller,
        "to": to,
        "amount_currency": amount_currency,
        "amount_token": amount_token
    })

    leave()
    return liquidity

@export
def burn(to: str):
    enter()

    currency_contract = I.import_module(metadata['currency'])
    token_contract = I.import_module(metadata['token'])
    currency_balance, token_balance = live_balances()

    liquidity = balances[ctx.this]
    assert liquidity > 0, 'need to burn more liquidity'

    supply = total_supply.get()
    amount_currency = liquidity * currency_balance // supply
    amount_token = liquidity * token_balance // supply
    assert amount_currency > 0 or amount_token > 0, 'insufficient liquidity burned'

    burn_shares(ctx.this, liquidity)

    if amount_currency > 0:
        currency_contract.transfer(amount=amount_currency, to=to)
    if amount_token > 0:
        token_contract.transfer(amount=amount_token, to=to)

    currency_balance, token_balance = live_balances()
    update_reserves(currency_balance, token_balance)

    LiquidityBurned({
        "caller": ctx.caller,
        "to": to,
        "amount_currency": amount_currency,
        "amount_token": amount_token
    })

    leave()
    return [amount_currency, amount_token]

@export
def swap(amount_currency_out: int, amount_token_out: int, to: str):
    enter()

    assert amount_currency_out >= 0 and amount_token_out >= 0, 'Cannot swap negative amounts!'
    assert amount_currency_out > 0 or amount_token_out > 0, 'insufficient output amount'

    reserve_currency = reserves['currency']
    reserve_token = reserves['token']
    assert amount_currency_out < reserve_currency and amount_token_out < reserve_token, \
        'insufficient liquidity'
    assert to != metadata['currency'] and to != metadata['token'], 'invalid to'

    currency_contract = I.import_module(metadata['currency'])
    token_contract = I.import_module(metadata['token'])

    # Optimistic payout, settled against balances below
    if amount_currency_out > 0:
        currency_contract.transfer(amount=amount_currency_out, to=to)
    if amount_token_out > 0:
        token_contract.transfer(amount=amount_token_out, to=to)

    currency_balance, token_balance = live_balances()

    amount_currency_in = 0
    if currency_balance > reserve_currency - amount_currency_out:
        amount_currency_in = currency_balance - (reserve_currency - amount_currency_out)
    amount_token_in = 0
    if token_balance > reserve_token - amount_token_out:
        amount_token_in = token_balance - (reserve_token - amount_token_out)
    assert amount_currency_in > 0 or amount_token_in > 0, 'insufficient input amount'

    currency_adjusted = currency_balance * FEE_DENOMINATOR - amount_currency_in * FEE_NUMERATOR
    token_adjusted = token_balance * FEE_DENOMINATOR - amount_token_in * FEE_NUMERATOR
    assert currency_adjusted * token_adjusted >= \
        reserve_currency * reserve_token * FEE_DENOMINATOR * FEE_DENOMINATOR, 'invariant violated'

    update_reserves(currency_balance, token_balance)

    Swapped({
        "caller": ctx.caller,
        "to": to,
        "amount_currency_in": amount_currency_in,
        "amount_token_in": amount_token_in,
        "amount_currency_out": amount_currency_out,
        "amount_token_out": amount_token_out
    })

    leave()
    return {
        "amount_currency_in": amount_currency_in,
        "amount_token_in": amount_token_in,
        "amount_currency_out": amount_currency_out,
        "amount_token_out": amount_token_out
    }

# --- LP share ledger ---
@export
def transfer(amount: int, to: str):
    assert amount > 0, 'Cannot transfer zero or negative!'
    sender = ctx.caller

    sender_bal = balances[sender]
    assert sender_bal >= amount, f'Transfer amount exceeds balance for sender {sender}!'

    balances[sender] = sender_bal - amount
    balances[to] += amount
    LPTransfer({"from": sender, "to": to, "amount": amount})

@export
def approve(amount: int, to: str):
    assert amount >= 0, 'Cannot approve negative!'
    balances[ctx.caller, to] = amount

@export
def transfer_from(amount: int, to: str, main_account: str):
    assert amount > 0, 'Cannot transfer zero or negative!'
    spender = ctx.caller

    allowance = balances[main_account, spender]
    assert allowance >= amount, \
        f'Transfer amount {amount} exceeds allowance {allowance} for {main_account} by spender {spender}!'

    main_account_bal = balances[main_account]
    assert main_account_bal >= amount, f'Transfer amount {amount} exceeds balance {main_account_bal} for main_account {main_account}!'

    balances[main_account, spender] = allowance - amount
    balances[main_account] = main_account_bal - amount
    balances[to] += amount
    LPTransfer({"from": main_account, "to": to, "amount": amount})

@export
def balance_of(address: str):
    return balances[address]

@export
def allowance(owner: str, spender: str):
    return balances[owner, spender]

@export
def get_total_supply():
    return total_supply.get()

balances = Hash(default_value=0)
allowed = Hash(default_value=False)
metadata = Hash()

TAX_PERCENTAGE = 5 # treasury keeps 5%, receiver gets 95%
TOTAL_SUPPLY = 500000
RECEIVER_SHARE = 150000

# Events
Transfer = LogEvent(
    event="transfer",
    params={
        "from": {'type':str, 'idx':True},
        "to": {'type':str, 'idx':True},
        "amount": {'type':(int, float, decimal)}
    })

Approval = LogEvent(
    event="approval",
    params={
        "owner": {'type':str, 'idx':True},
        "spender": {'type':str, 'idx':True},
        "amount": {'type':(int, float, decimal)}
    })

TaxToggled = LogEvent(
    event="tax_toggled",
    params={
        "enabled": {'type':bool}
    })

OwnershipTransferred = LogEvent(
    event="ownership_transferred",
    params={
        "previous_owner": {'type':str, 'idx':True},
        "new_owner": {'type':str, 'idx':True}
    })

@construct
def seed():
    metadata['token_name'] = "NewCoin"
    metadata['token_symbol'] = "NEW"
    metadata['owner'] = ctx.caller
    metadata['total_supply'] = 0
    metadata['initialized'] = False
    metadata['transfers_enabled'] = False
    metadata['tax_enabled'] = False

def assert_owner():
    assert ctx.caller == metadata['owner'], 'caller not the owner'

@export
def initialize(receiver: str, treasury: str, allowed_addresses: list):
    assert_owner()
    assert not metadata['initialized'], 'already initialized'
    metadata['initialized'] = True
    metadata['treasury'] = treasury

    balances[receiver] += RECEIVER_SHARE
    balances[treasury] += TOTAL_SUPPLY - RECEIVER_SHARE
    metadata['total_supply'] = TOTAL_SUPPLY

    for address in allowed_addresses:
        allowed[address] = True

@export
def enable_transfers():
    # One-way latch, nothing flips it back
    assert_owner()
    metadata['transfers_enabled'] = True

@export
def enable_tax(enabled: bool):
    assert_owner()
    assert enabled != metadata['tax_enabled'], 'tax unchanged'
    metadata['tax_enabled'] = enabled
    TaxToggled({"enabled": enabled})

@export
def transfer_ownership(new_owner: str):
    assert_owner()
    previous_owner = metadata['owner']
    metadata['owner'] = new_owner
    OwnershipTransferred({"previous_owner": previous_owner, "new_owner": new_owner})

def split_amount(amount):
    if not metadata['tax_enabled']:
        return {"net": amount, "tax": 0}
    net = amount * (100 - TAX_PERCENTAGE) // 100
    return {"net": net, "tax": amount - net}

def move(sender, to, amount):
    # Until transfers open, only allow-listed senders or recipients move tokens
    assert metadata['transfers_enabled'] or allowed[sender] or allowed[to], 'not allowed'
    assert to != ctx.this, 'contract transfer not allowed'
    assert amount >= 0, 'Cannot transfer negative!'

    sender_bal = balances[sender]
    assert sender_bal >= amount, f'Transfer amount exceeds balance for sender {sender}!'

    receipt = split_amount(amount)
    balances[sender] = sender_bal - amount

    if metadata['tax_enabled']:
        treasury = metadata['treasury']
        balances[treasury] += receipt["tax"]
        Transfer({"from": sender, "to": treasury, "amount": receipt["tax"]})

    balances[to] += receipt["net"]
    Transfer({"from": sender, "to": to, "amount": receipt["net"]})
    return receipt

@export
def transfer(amount: int, to: str):
    return move(ctx.caller, to, amount)

@export
def transfer_from(amount: int, to: str, main_account: str):
    spender = ctx.caller

    allowance = balances[main_account, spender]
    assert allowance >= amount, \
        f'Transfer amount {amount} exceeds allowance {allowance} for {main_account} by spender {spender}!'

    receipt = move(main_account, to, amount)
    balances[main_account, spender] = allowance - amount
    return receipt

@export
def approve(amount: int, to: str):
    assert amount >= 0, 'Cannot approve negative!' # Allow 0 for clearing approval
    balances[ctx.caller, to] = amount
    Approval({"owner": ctx.caller, "spender": to, "amount": amount})

@export
def increase_allowance(amount: int, to: str):
    assert amount >= 0, 'Cannot increase allowance by a negative amount!'
    balances[ctx.caller, to] += amount
    Approval({"owner": ctx.caller, "spender": to, "amount": balances[ctx.caller, to]})

@export
def decrease_allowance(amount: int, to: str):
    current = balances[ctx.caller, to]
    assert amount >= 0, 'Cannot decrease allowance by a negative amount!'
    assert current >= amount, 'decreased allowance below zero'
    balances[ctx.caller, to] = current - amount
    Approval({"owner": ctx.caller, "spender": to, "amount": current - amount})

@export
def quote_transfer(amount: int):
    assert amount >= 0, 'Cannot quote negative!'
    return split_amount(amount)

@export
def balance_of(address: str):
    return balances[address]

@export
def allowance(owner: str, spender: str):
    return balances[owner, spender]

@export
def total_supply():
    return metadata['total_supply']

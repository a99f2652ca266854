balances = Hash(default_value=0)
metadata = Hash()

INITIAL_SUPPLY = 10000000

Transfer = LogEvent(
    event="transfer",
    params={
        "from": {'type':str, 'idx':True},
        "to": {'type':str, 'idx':True},
        "amount": {'type':(int, float, decimal)}
    })

@construct
def seed():
    balances[ctx.caller] = INITIAL_SUPPLY
    metadata['token_name'] = "Settlement Currency"
    metadata['token_symbol'] = "XIAN"
    metadata['total_supply'] = INITIAL_SUPPLY

@export
def transfer(amount: int, to: str):
    assert amount > 0, 'Cannot transfer zero or negative!'
    sender = ctx.caller

    sender_bal = balances[sender]
    assert sender_bal >= amount, f'Transfer amount exceeds balance for sender {sender}!'

    balances[sender] = sender_bal - amount
    balances[to] += amount
    Transfer({"from": sender, "to": to, "amount": amount})

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
    Transfer({"from": main_account, "to": to, "amount": amount})

@export
def balance_of(address: str):
    return balances[address]

@export
def allowance(owner: str, spender: str):
    return balances[owner, spender]

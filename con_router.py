I = importlib

metadata = Hash()

FEE_DENOMINATOR = 100
FEE_KEEP = 99 # input share left after the 1% fee

@construct
def seed(token, pool, currency):
    metadata['token'] = token
    metadata['pool'] = pool
    metadata['currency'] = currency

def quote_out(amount_in, reserve_in, reserve_out):
    assert reserve_in > 0 and reserve_out > 0, 'invalid reserves'
    # multiply before dividing, one floor at the end
    amount_in_with_fee = amount_in * FEE_KEEP
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator

@export
def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int):
    assert amount_in >= 0, 'Cannot quote negative input!'
    return quote_out(amount_in, reserve_in, reserve_out)

@export
def add_liquidity(amount_token_desired: int, to: str, value_currency: int):
    assert amount_token_desired >= 0 and value_currency >= 0, 'Cannot add negative amounts!'
    pool_name = metadata['pool']

    # Deposits land in the pool first, the pool measures what really arrived
    if amount_token_desired > 0:
        I.import_module(metadata['token']).transfer_from(
            amount=amount_token_desired,
            to=pool_name,
            main_account=ctx.caller
        )
    if value_currency > 0:
        I.import_module(metadata['currency']).transfer_from(
            amount=value_currency,
            to=pool_name,
            main_account=ctx.caller
        )

    return I.import_module(pool_name).mint(to=to)

@export
def remove_liquidity(liquidity: int, to: str):
    assert liquidity > 0, 'need to burn more liquidity'
    pool_name = metadata['pool']
    pool = I.import_module(pool_name)

    pool.transfer_from(amount=liquidity, to=pool_name, main_account=ctx.caller)
    return pool.burn(to=to)

@export
def swap(amount_token_in: int, amount_out_min: int, to: str, value_currency: int):
    assert amount_token_in >= 0 and value_currency >= 0, 'Cannot swap negative amounts!'
    assert amount_token_in > 0 or value_currency > 0, 'insufficient input amount'
    assert amount_token_in == 0 or value_currency == 0, 'only one input asset allowed'

    pool_name = metadata['pool']
    pool = I.import_module(pool_name)
    reserve_currency, reserve_token = pool.get_reserves()

    if value_currency > 0:
        I.import_module(metadata['currency']).transfer_from(
            amount=value_currency,
            to=pool_name,
            main_account=ctx.caller
        )
        amount_out = quote_out(value_currency, reserve_currency, reserve_token)
        assert amount_out >= amount_out_min, 'token min amount'
        return pool.swap(amount_currency_out=0, amount_token_out=amount_out, to=to)

    # Price the tokens the pool actually received, not the nominal amount
    receipt = I.import_module(metadata['token']).transfer_from(
        amount=amount_token_in,
        to=pool_name,
        main_account=ctx.caller
    )
    amount_out = quote_out(receipt["net"], reserve_token, reserve_currency)
    assert amount_out >= amount_out_min, 'currency min amount'
    return pool.swap(amount_currency_out=amount_out, amount_token_out=0, to=to)

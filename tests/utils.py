import unittest
from contracting.client import ContractingClient
from pathlib import Path

CONTRACTS_DIR = Path(__file__).resolve().parent.parent
TESTS_DIR = Path(__file__).resolve().parent

TAX_PERCENTAGE = 5
TOTAL_SUPPLY = 500_000


def submit_contract(client, path, name, signer, constructor_args=None):
    with open(path) as f:
        client.submit(f.read(), name=name, signer=signer, constructor_args=constructor_args or {})
    return client.get_contract(name)


def amount_out(amount_in, reserve_in, reserve_out):
    amount_in_with_fee = amount_in * 99
    return amount_in_with_fee * reserve_out // (reserve_in * 100 + amount_in_with_fee)


def net_of_tax(amount):
    return amount * (100 - TAX_PERCENTAGE) // 100


def event_payloads(output, contract, event):
    """Payloads of one contract's events, in emission order.

    `output` is a call made with `return_full_output=True`. Indexed and
    plain fields are merged into a single dict per event.
    """
    return [
        {**e['data_indexed'], **e['data']}
        for e in output['events']
        if e['contract'] == contract and e['event'] == event
    ]


class ExchangeTestCase(unittest.TestCase):
    """Deploys token, currency, pool and router in bootstrap order.

    Subclasses tune the deployment through the class attributes below.
    """
    currency_path = CONTRACTS_DIR / "con_currency.py"
    enable_transfers = True

    def setUp(self):
        self.client = ContractingClient()
        self.client.flush() # Ensures a clean state

        self.operator = 'sys' # Submits the contracts and owns the token
        self.treasury = 'treasury'
        self.alice = 'alice'
        self.bob = 'bob'

        self.token_name = "con_tax_token"
        self.currency_name = "con_currency"
        self.pool_name = "con_liquidity_pool"
        self.router_name = "con_router"

        self.token = submit_contract(self.client, CONTRACTS_DIR / "con_tax_token.py",
                                     self.token_name, self.operator)
        self.currency = submit_contract(self.client, self.currency_path,
                                        self.currency_name, self.operator)
        self.pool, self.router = self.deploy_pair(self.pool_name, self.router_name)

        if self.enable_transfers:
            self.token.enable_transfers(signer=self.operator)
        self.token.initialize(
            receiver=self.operator,
            treasury=self.treasury,
            allowed_addresses=self.allowed_addresses(),
            signer=self.operator
        )

    def tearDown(self):
        self.client.flush()

    def allowed_addresses(self):
        return []

    def deploy_pair(self, pool_name, router_name):
        pool = submit_contract(
            self.client, CONTRACTS_DIR / "con_liquidity_pool.py", pool_name, self.operator,
            constructor_args={"token": self.token_name, "currency": self.currency_name}
        )
        router = submit_contract(
            self.client, CONTRACTS_DIR / "con_router.py", router_name, self.operator,
            constructor_args={"token": self.token_name, "pool": pool_name, "currency": self.currency_name}
        )
        return pool, router

    def fund(self, account, tokens=0, currency=0):
        if tokens:
            self.token.transfer(amount=tokens, to=account, signer=self.operator)
        if currency:
            self.currency.transfer(amount=currency, to=account, signer=self.operator)

    def add_liquidity(self, provider, tokens, currency, to=None, router_name=None):
        router_name = router_name or self.router_name
        router = self.client.get_contract(router_name)
        if tokens:
            self.token.approve(amount=tokens, to=router_name, signer=provider)
        if currency:
            self.currency.approve(amount=currency, to=router_name, signer=provider)
        return router.add_liquidity(
            amount_token_desired=tokens,
            to=to or provider,
            value_currency=currency,
            signer=provider
        )

    def seed_pool(self, tokens=150_000, currency=30_000):
        # Stand-in for the sale contract handing its raised funds to the pool
        self.fund(self.treasury, currency=currency)
        return self.add_liquidity(self.treasury, tokens, currency)

    def token_supply_held(self, accounts):
        return sum(self.token.balance_of(address=a) for a in accounts)

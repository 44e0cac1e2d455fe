import click
from eth_utils import is_address, to_checksum_address

from zeyphr_deployment.constants import DEFAULT_NAMED_ACCOUNTS, MAX_FEE_PERCENT, MIN_FEE_PERCENT


class FeePercent(click.ParamType):
    """Whole-number marketplace fee, as taken by the ZeyphrAdmin constructor."""

    name = "fee_percent"

    def convert(self, value, param, ctx):
        if isinstance(value, int) and not isinstance(value, bool):
            percent = value
        else:
            try:
                percent = int(str(value).strip().rstrip("%"))
            except ValueError:
                self.fail(f"{value!r} is not a whole percentage", param, ctx)
        if not MIN_FEE_PERCENT <= percent <= MAX_FEE_PERCENT:
            self.fail(
                f"{percent} is outside the {MIN_FEE_PERCENT}-{MAX_FEE_PERCENT}% fee range",
                param,
                ctx,
            )
        return percent


class FeeAccount(click.ParamType):
    """
    Fee-collecting account: either a named account role (e.g. 'deployer')
    or an ethereum address, which is returned checksummed.
    """

    name = "fee_account"

    def __init__(self, roles=tuple(DEFAULT_NAMED_ACCOUNTS)):
        self.roles = tuple(roles)

    def convert(self, value, param, ctx):
        value = value.strip()
        if value in self.roles:
            return value
        if is_address(value):
            return to_checksum_address(value)
        self.fail(
            f"{value} is neither an address nor one of the named accounts "
            f"({', '.join(self.roles)})",
            param,
            ctx,
        )

from abc import ABC, abstractmethod
from typing import Any

from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

from zeyphr_deployment.exceptions import AccountResolutionError


class AccountResolver(ABC):
    """Maps a logical account role (e.g. 'deployer') to a signing account."""

    @abstractmethod
    def resolve(self, role: str) -> Any:
        raise NotImplementedError

    def resolve_address(self, value: str) -> ChecksumAddress:
        """
        Returns the address of a role, or the value itself when it is already
        an address.
        """
        if is_address(value):
            return to_checksum_address(value)
        account = self.resolve(value)
        address = getattr(account, "address", None)
        if not address:
            raise AccountResolutionError(f"Account for role '{value}' has no address.")
        return to_checksum_address(address)

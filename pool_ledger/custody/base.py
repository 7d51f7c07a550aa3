"""Abstract base class for asset custody."""

from abc import ABC, abstractmethod


class Custody(ABC):
    """
    Abstract interface for the component that holds the pooled asset.

    The engine never moves funds itself. It asks custody to pull a deposit in
    or pay a withdrawal out as part of the same synchronous operation, and
    treats any exception raised here as a rejection of that operation.
    """

    @abstractmethod
    def balance(self) -> int:
        """
        Get the amount of the asset currently held.

        Returns:
            Asset units in custody
        """
        pass

    @abstractmethod
    def collect(self, participant: str, amount: int) -> None:
        """
        Move ``amount`` from the participant into custody.

        Args:
            participant: Depositing participant
            amount: Asset units to pull in

        Raises:
            CustodyError: if the transfer could not be completed
        """
        pass

    @abstractmethod
    def release(self, participant: str, amount: int) -> None:
        """
        Pay ``amount`` out of custody to the participant.

        Args:
            participant: Withdrawing participant
            amount: Asset units to pay out

        Raises:
            InsufficientCustodyError: if custody holds less than ``amount``
            CustodyError: if the transfer could not be completed
        """
        pass

    def close(self) -> None:
        """
        Clean up resources (e.g., close HTTP sessions).

        Override this if the custody holds resources that need cleanup.
        """
        pass

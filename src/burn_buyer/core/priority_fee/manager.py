from solders.compute_budget import set_compute_unit_price
from solders.instruction import Instruction

from burn_buyer.utils.logger import get_logger

logger = get_logger(__name__)

# SetComputeUnitPrice carries a u64
MAX_COMPUTE_UNIT_PRICE = 2**64 - 1


class PriorityFeeManager:
    """Produces the compute-unit-price directive that opens every transaction.

    The fee is fixed for the lifetime of the manager; there is no
    network-based estimation.
    """

    def __init__(self, fixed_fee: int, hard_cap: int):
        """
        Args:
            fixed_fee: Priority fee in microlamports per compute unit.
            hard_cap: Maximum allowed priority fee in microlamports.

        Raises:
            ValueError: If either value is outside the u64 range.
        """
        for label, value in (("Priority fee", fixed_fee), ("Priority fee hard cap", hard_cap)):
            if not 0 <= value <= MAX_COMPUTE_UNIT_PRICE:
                raise ValueError(f"{label} must be a non-negative u64, got {value}")
        self.fixed_fee = fixed_fee
        self.hard_cap = hard_cap

    async def calculate_priority_fee(self) -> int:
        """
        Return the fee to use, clamped to the hard cap.

        Returns:
            int: Priority fee in microlamports.
        """
        if self.fixed_fee > self.hard_cap:
            logger.warning(
                f"Priority fee {self.fixed_fee} exceeds hard cap {self.hard_cap}. Applying hard cap."
            )
            return self.hard_cap
        return self.fixed_fee

    async def build_instruction(self) -> Instruction:
        """
        Build the compute budget instruction carrying the priority fee.

        Returns:
            Instruction: SetComputeUnitPrice instruction.
        """
        fee = await self.calculate_priority_fee()
        logger.info(f"Priority fee in microlamports: {fee}")
        return set_compute_unit_price(fee)

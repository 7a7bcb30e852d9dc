"""
Invoice number formatting.

Numbers look like "DOW-00001": the branch code (first letters of the branch
name, uppercased) and the branch's running invoice count plus one. The count
includes soft-deleted invoices so numbers are never reissued. Uniqueness
under concurrency is the store's job: it calls the allocator inside the same
serialized transaction that inserts the invoice.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class InvoiceNumberAllocator:
    """Formats per-branch sequential invoice numbers."""

    prefix_length: int = 3
    width: int = 5
    filler: str = "X"

    def branch_code(self, branch_name: str) -> str:
        """Leading prefix_length characters of the name as written, spaces included, padded if short."""
        code = branch_name.upper()[: self.prefix_length]
        return code.ljust(self.prefix_length, self.filler)

    def format(self, branch_name: str, existing_count: int) -> str:
        return f"{self.branch_code(branch_name)}-{existing_count + 1:0{self.width}d}"

    def for_branch(self, branch_name: str):
        """Bind the branch name, leaving the count to be filled in by the store."""

        def allocate(existing_count: int) -> str:
            return self.format(branch_name, existing_count)

        return allocate

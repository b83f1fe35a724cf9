"""Tortoise model backing the SQL sales store."""

from tortoise import fields
from ...common.models import TimestampMixin, generate_ksuid


class Sale(TimestampMixin):
    id = fields.IntField(primary_key=True)
    public_id = fields.CharField(
        max_length=27, unique=True, default=generate_ksuid, db_index=True
    )
    # Every column is optional: documents imported from the POS may lack any of them
    timestamp = fields.DatetimeField(null=True, db_index=True)
    employee_email = fields.CharField(max_length=255, null=True)
    subtotal = fields.DecimalField(max_digits=12, decimal_places=2, null=True)
    total = fields.DecimalField(max_digits=12, decimal_places=2, null=True)

    def to_document(self) -> dict:
        """The same shape a Firestore sale document has."""
        return {
            "timestamp": self.timestamp,
            "employee_email": self.employee_email,
            "subtotal": self.subtotal,
            "total": self.total,
        }

    def __str__(self):
        return f"Sale {self.public_id} by {self.employee_email or 'unknown'} (Total: {self.total})"

    class Meta:
        table = "sales"

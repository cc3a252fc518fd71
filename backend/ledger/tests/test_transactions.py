from datetime import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from ledger.exceptions import NotFoundError, ValidationError
from ledger.models import Transaction
from ledger.services.accounts import create_account
from ledger.services.categories import create_category
from ledger.services.transactions import (
    create_transaction,
    delete_transaction,
    get_transaction,
    list_transactions,
    update_transaction,
)


def moment(year, month, day, hour=12):
    return timezone.make_aware(datetime(year, month, day, hour, 0))


class TransactionTestCase(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="owner", password="password")
        self.other = get_user_model().objects.create_user(username="other", password="password")
        self.wallet = create_account(self.user, "Wallet")
        self.bank = create_account(self.user, "Bank")
        self.freelance = create_category(self.user, "Freelance", "income")
        self.groceries = create_category(self.user, "Groceries", "expense")
        self.foreign_account = create_account(self.other, "Foreign wallet")
        self.foreign_category = create_category(self.other, "Foreign groceries", "expense")


class TransactionValidationTests(TransactionTestCase):
    def test_income_created(self):
        txn = create_transaction(
            self.user, self.wallet.id, "income", Decimal("100"), moment(2025, 3, 1), category_id=self.freelance.id
        )
        self.assertEqual(txn.account_id, self.wallet.id)
        self.assertEqual(txn.category_id, self.freelance.id)
        self.assertIsNone(txn.transfer_account_id)

    def test_expense_created_with_note(self):
        txn = create_transaction(
            self.user,
            self.wallet.id,
            "expense",
            Decimal("12.50"),
            moment(2025, 3, 1),
            category_id=self.groceries.id,
            note="market",
        )
        self.assertEqual(txn.note, "market")

    def test_transfer_created(self):
        txn = create_transaction(
            self.user, self.wallet.id, "transfer", Decimal("40"), moment(2025, 3, 1), transfer_account_id=self.bank.id
        )
        self.assertIsNone(txn.category_id)
        self.assertEqual(txn.transfer_account_id, self.bank.id)

    def test_amount_must_be_positive_for_every_type(self):
        cases = [
            ("income", {"category_id": self.freelance.id}),
            ("expense", {"category_id": self.groceries.id}),
            ("transfer", {"transfer_account_id": self.bank.id}),
        ]
        for transaction_type, extra in cases:
            for amount in (Decimal("0"), Decimal("-5")):
                with self.subTest(transaction_type=transaction_type, amount=amount):
                    with self.assertRaises(ValidationError):
                        create_transaction(
                            self.user, self.wallet.id, transaction_type, amount, moment(2025, 3, 1), **extra
                        )
        self.assertEqual(Transaction.objects.count(), 0)

    def test_income_with_transfer_account_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(
                self.user,
                self.wallet.id,
                "income",
                Decimal("10"),
                moment(2025, 3, 1),
                category_id=self.freelance.id,
                transfer_account_id=self.bank.id,
            )

    def test_income_requires_category(self):
        with self.assertRaises(ValidationError):
            create_transaction(self.user, self.wallet.id, "income", Decimal("10"), moment(2025, 3, 1))

    def test_expense_with_income_category_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            create_transaction(
                self.user, self.wallet.id, "expense", Decimal("10"), moment(2025, 3, 1), category_id=self.freelance.id
            )
        self.assertIn("expense", ctx.exception.message)

    def test_income_with_expense_category_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(
                self.user, self.wallet.id, "income", Decimal("10"), moment(2025, 3, 1), category_id=self.groceries.id
            )

    def test_foreign_category_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(
                self.user,
                self.wallet.id,
                "expense",
                Decimal("10"),
                moment(2025, 3, 1),
                category_id=self.foreign_category.id,
            )

    def test_transfer_with_category_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(
                self.user,
                self.wallet.id,
                "transfer",
                Decimal("10"),
                moment(2025, 3, 1),
                category_id=self.groceries.id,
                transfer_account_id=self.bank.id,
            )

    def test_transfer_requires_destination(self):
        with self.assertRaises(ValidationError):
            create_transaction(self.user, self.wallet.id, "transfer", Decimal("10"), moment(2025, 3, 1))

    def test_transfer_to_same_account_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(
                self.user,
                self.wallet.id,
                "transfer",
                Decimal("10"),
                moment(2025, 3, 1),
                transfer_account_id=self.wallet.id,
            )

    def test_transfer_to_foreign_account_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(
                self.user,
                self.wallet.id,
                "transfer",
                Decimal("10"),
                moment(2025, 3, 1),
                transfer_account_id=self.foreign_account.id,
            )

    def test_foreign_source_account_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(
                self.user,
                self.foreign_account.id,
                "expense",
                Decimal("10"),
                moment(2025, 3, 1),
                category_id=self.groceries.id,
            )
        self.assertEqual(Transaction.objects.count(), 0)

    def test_sub_cent_amounts_rejected(self):
        for amount in ("0.001", "0.004", "10.125"):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError):
                    create_transaction(
                        self.user,
                        self.wallet.id,
                        "income",
                        Decimal(amount),
                        moment(2025, 3, 1),
                        category_id=self.freelance.id,
                    )
        self.assertEqual(Transaction.objects.count(), 0)

    def test_amount_too_large_for_column_rejected(self):
        for amount in ("1e20", "1e16", "-1e20"):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError):
                    create_transaction(
                        self.user,
                        self.wallet.id,
                        "expense",
                        Decimal(amount),
                        moment(2025, 3, 1),
                        category_id=self.groceries.id,
                    )
        self.assertEqual(Transaction.objects.count(), 0)

    def test_trailing_zeros_beyond_cents_accepted(self):
        txn = create_transaction(
            self.user, self.wallet.id, "income", Decimal("12.500"), moment(2025, 3, 1), category_id=self.freelance.id
        )
        txn.refresh_from_db()
        self.assertEqual(txn.amount, Decimal("12.50"))

    def test_unknown_type_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(self.user, self.wallet.id, "refund", Decimal("10"), moment(2025, 3, 1))

    def test_missing_date_rejected(self):
        with self.assertRaises(ValidationError):
            create_transaction(
                self.user, self.wallet.id, "income", Decimal("10"), None, category_id=self.freelance.id
            )


class TransactionUpdateTests(TransactionTestCase):
    def setUp(self):
        super().setUp()
        self.txn = create_transaction(
            self.user, self.wallet.id, "income", Decimal("100"), moment(2025, 3, 1), category_id=self.freelance.id
        )

    def test_update_revalidates_proposed_values(self):
        with self.assertRaises(ValidationError):
            update_transaction(self.user, self.txn.id, "transfer", Decimal("100"), moment(2025, 3, 1))
        self.txn.refresh_from_db()
        self.assertEqual(self.txn.type, "income")
        self.assertEqual(self.txn.category_id, self.freelance.id)

    def test_update_switches_to_transfer(self):
        updated = update_transaction(
            self.user, self.txn.id, "transfer", Decimal("60"), moment(2025, 3, 2), transfer_account_id=self.bank.id
        )
        self.assertIsNone(updated.category_id)
        self.assertEqual(updated.transfer_account_id, self.bank.id)
        self.assertEqual(updated.amount, Decimal("60"))

    def test_account_cannot_change(self):
        with self.assertRaises(ValidationError):
            update_transaction(
                self.user,
                self.txn.id,
                "income",
                Decimal("100"),
                moment(2025, 3, 1),
                category_id=self.freelance.id,
                account_id=self.bank.id,
            )
        self.txn.refresh_from_db()
        self.assertEqual(self.txn.account_id, self.wallet.id)

    def test_update_rejects_sub_cent_amount(self):
        with self.assertRaises(ValidationError):
            update_transaction(
                self.user, self.txn.id, "income", Decimal("0.004"), moment(2025, 3, 1), category_id=self.freelance.id
            )
        self.txn.refresh_from_db()
        self.assertEqual(self.txn.amount, Decimal("100"))

    def test_same_account_id_accepted(self):
        updated = update_transaction(
            self.user,
            self.txn.id,
            "income",
            Decimal("150"),
            moment(2025, 3, 1),
            category_id=self.freelance.id,
            account_id=self.wallet.id,
        )
        self.assertEqual(updated.amount, Decimal("150"))

    def test_foreign_transaction_not_found(self):
        with self.assertRaises(NotFoundError):
            get_transaction(self.other, self.txn.id)
        with self.assertRaises(NotFoundError):
            update_transaction(self.other, self.txn.id, "income", Decimal("1"), moment(2025, 3, 1))
        with self.assertRaises(NotFoundError):
            delete_transaction(self.other, self.txn.id)
        self.assertTrue(Transaction.objects.filter(pk=self.txn.id).exists())

    def test_delete(self):
        delete_transaction(self.user, self.txn.id)
        self.assertFalse(Transaction.objects.filter(pk=self.txn.id).exists())


class TransactionListTests(TransactionTestCase):
    def setUp(self):
        super().setUp()
        self.early = create_transaction(
            self.user, self.wallet.id, "expense", Decimal("5"), moment(2025, 3, 1), category_id=self.groceries.id
        )
        self.late = create_transaction(
            self.user, self.bank.id, "income", Decimal("50"), moment(2025, 3, 20), category_id=self.freelance.id
        )
        self.tie_first = create_transaction(
            self.user, self.wallet.id, "expense", Decimal("7"), moment(2025, 3, 10), category_id=self.groceries.id
        )
        self.tie_second = create_transaction(
            self.user,
            self.wallet.id,
            "transfer",
            Decimal("9"),
            moment(2025, 3, 10),
            transfer_account_id=self.bank.id,
        )

    def test_newest_first_then_highest_id(self):
        ids = list(list_transactions(self.user).values_list("id", flat=True))
        self.assertEqual(ids, [self.late.id, self.tie_second.id, self.tie_first.id, self.early.id])
        self.assertEqual(ids, list(list_transactions(self.user).values_list("id", flat=True)))

    def test_filter_by_type(self):
        rows = list(list_transactions(self.user, transaction_type="expense"))
        self.assertEqual(rows, [self.tie_first, self.early])

    def test_filter_by_account_and_category(self):
        self.assertEqual(list(list_transactions(self.user, account_id=self.bank.id)), [self.late])
        self.assertEqual(
            list(list_transactions(self.user, category_id=self.groceries.id)), [self.tie_first, self.early]
        )

    def test_date_bounds_are_inclusive(self):
        rows = list(list_transactions(self.user, date_from=moment(2025, 3, 1), date_to=moment(2025, 3, 10)))
        self.assertEqual(rows, [self.tie_second, self.tie_first, self.early])

    def test_scoped_to_user(self):
        self.assertEqual(list(list_transactions(self.other)), [])

import unittest
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, Numeric, String, create_engine
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from admin_query.schemas.filters import FilterClause
from admin_query.schemas.universal import QueryDescriptor
from admin_query.services.filter_evaluator import MissingFilterValueError, apply_filters
from admin_query.services.filter_operators import UnknownOperatorError
from admin_query.services.resources import CUSTOMERS, ORDERS, PRODUCTS, UnknownViewError
from admin_query.services.universal_query import (
    FilterValueError,
    _coerce_filter_value,
    apply_filter_clauses,
    run_sql_query,
)


class _Base(DeclarativeBase):
    pass


class _QueryTestModel(_Base):
    __tablename__ = "_uq_test_model"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    bool_col: Mapped[bool] = mapped_column(Boolean)
    int_col: Mapped[int] = mapped_column(Integer)
    float_col: Mapped[float] = mapped_column(Float)
    numeric_col: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    date_col: Mapped[date] = mapped_column(Date)
    dt_col: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    uuid_col: Mapped[uuid.UUID] = mapped_column(PGUUID(as_uuid=True))
    text_col: Mapped[str] = mapped_column(String(50))


class _ApplyBase(DeclarativeBase):
    pass


class _OrderRow(_ApplyBase):
    __tablename__ = "_uq_orders"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    status: Mapped[str] = mapped_column(String(20))
    courier: Mapped[str | None] = mapped_column(String(20), nullable=True)
    totalAmount: Mapped[float] = mapped_column(Float)
    createdAt: Mapped[datetime] = mapped_column(DateTime(timezone=False))
    updatedAt: Mapped[int | None] = mapped_column(Integer, nullable=True)


class _CustomerRow(_ApplyBase):
    __tablename__ = "_uq_customers"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    isReturning: Mapped[bool] = mapped_column(Boolean)
    orderedRecently: Mapped[bool] = mapped_column(Boolean)


class _ProductRow(_ApplyBase):
    __tablename__ = "_uq_products"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(20))
    stock: Mapped[int] = mapped_column(Integer)


_PRODUCT_ROWS = [
    {"id": "P-1", "name": "401_1BBXBK", "status": "published", "stock": 5},
    {"id": "P-2", "name": "401X1BBXBK", "status": "published", "stock": 3},
    {"id": "P-3", "name": "10% off bundle", "status": "draft", "stock": 8},
    {"id": "P-4", "name": "100 pack", "status": "archived", "stock": 1},
]


class UniversalQueryCoercionTests(unittest.TestCase):
    def test_boolean_accepts_string_values(self):
        self.assertTrue(_coerce_filter_value(_QueryTestModel.bool_col, "true"))
        self.assertTrue(_coerce_filter_value(_QueryTestModel.bool_col, "Yes"))
        self.assertFalse(_coerce_filter_value(_QueryTestModel.bool_col, "0"))
        self.assertFalse(_coerce_filter_value(_QueryTestModel.bool_col, "no"))

    def test_boolean_invalid_value_raises(self):
        with self.assertRaises(FilterValueError) as ctx:
            _coerce_filter_value(_QueryTestModel.bool_col, "maybe")
        self.assertEqual(ctx.exception.column_key, "bool_col")
        self.assertEqual(ctx.exception.kind, "boolean")

    def test_numbers_accept_string_values(self):
        self.assertEqual(_coerce_filter_value(_QueryTestModel.int_col, "42"), 42)
        self.assertAlmostEqual(_coerce_filter_value(_QueryTestModel.float_col, "3.14"), 3.14)
        self.assertEqual(_coerce_filter_value(_QueryTestModel.numeric_col, "99.50"), Decimal("99.50"))

    def test_invalid_number_raises(self):
        with self.assertRaises(FilterValueError):
            _coerce_filter_value(_QueryTestModel.int_col, "forty")

    def test_dates_accept_iso_date_and_datetime(self):
        self.assertEqual(_coerce_filter_value(_QueryTestModel.date_col, "2026-02-26"), date(2026, 2, 26))
        self.assertEqual(
            _coerce_filter_value(_QueryTestModel.date_col, "2026-02-26T13:45:00+03:00"),
            date(2026, 2, 26),
        )

    def test_datetime_accepts_date_only_and_makes_it_timezone_aware(self):
        value = _coerce_filter_value(_QueryTestModel.dt_col, "2026-02-26")
        self.assertIsInstance(value, datetime)
        self.assertEqual(value.date(), date(2026, 2, 26))
        self.assertEqual(value.tzinfo, timezone.utc)

    def test_uuid_accepts_string(self):
        uid = uuid.uuid4()
        self.assertEqual(_coerce_filter_value(_QueryTestModel.uuid_col, str(uid)), uid)

    def test_uuid_invalid_raises(self):
        with self.assertRaises(FilterValueError):
            _coerce_filter_value(_QueryTestModel.uuid_col, "not-a-uuid")

    def test_text_column_stringifies_values(self):
        self.assertEqual(_coerce_filter_value(_QueryTestModel.text_col, "abc"), "abc")
        self.assertEqual(_coerce_filter_value(_QueryTestModel.text_col, 5), "5")


class UniversalQueryApplyTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine("sqlite+pysqlite:///:memory:")
        _ApplyBase.metadata.create_all(cls.engine)
        with Session(cls.engine) as session:
            session.add_all(
                [
                    _OrderRow(
                        id="ORD-1",
                        status="complete",
                        courier="DHL",
                        totalAmount=500.0,
                        createdAt=datetime(2026, 2, 25, 23, 59, 59),
                        updatedAt=1772000000000,
                    ),
                    _OrderRow(
                        id="ORD-2",
                        status="delivered",
                        courier="UPS",
                        totalAmount=124.5,
                        createdAt=datetime(2026, 2, 26, 9, 30, 0),
                        updatedAt=None,
                    ),
                    _OrderRow(
                        id="ORD-3",
                        status="processed",
                        courier=None,
                        totalAmount=0.0,
                        createdAt=datetime(2026, 2, 26, 23, 59, 59),
                        updatedAt=None,
                    ),
                    _OrderRow(
                        id="ORD-4",
                        status="delivered",
                        courier="",
                        totalAmount=76.0,
                        createdAt=datetime(2026, 2, 27, 0, 0, 0),
                        updatedAt=1772200000000,
                    ),
                    _CustomerRow(id="C-1", name="Acme", isReturning=True, orderedRecently=False),
                    _CustomerRow(id="C-2", name="Beta", isReturning=False, orderedRecently=True),
                ]
            )
            session.add_all([_ProductRow(**row) for row in _PRODUCT_ROWS])
            session.commit()

    @classmethod
    def tearDownClass(cls):
        cls.engine.dispose()

    def _ids(self, filters, **kwargs):
        with Session(self.engine) as session:
            q = apply_filter_clauses(session.query(_OrderRow), _OrderRow, filters, **kwargs)
            return [row.id for row in q.order_by(_OrderRow.id.asc()).all()]

    def test_datetime_equal_date_uses_day_range(self):
        ids = self._ids([FilterClause(property="createdAt", operator="equals", value="2026-02-26")])
        self.assertEqual(ids, ["ORD-2", "ORD-3"])

    def test_datetime_not_equal_date_excludes_whole_day(self):
        ids = self._ids([FilterClause(property="createdAt", operator="notEqual", value="2026-02-26")])
        self.assertEqual(ids, ["ORD-1", "ORD-4"])

    def test_datetime_equal_full_timestamp_stays_exact(self):
        ids = self._ids([FilterClause(property="createdAt", operator="equals", value="2026-02-26T09:30:00")])
        self.assertEqual(ids, ["ORD-2"])

    def test_greater_than_zero_excludes_zero_total(self):
        ids = self._ids([FilterClause(property="totalAmount", operator="greaterThan", value=0)])
        self.assertEqual(ids, ["ORD-1", "ORD-2", "ORD-4"])
        ids = self._ids([FilterClause(property="totalAmount", operator="lessThan", value=100)])
        self.assertEqual(ids, ["ORD-4"])

    def test_text_operators_skip_null_and_empty(self):
        self.assertEqual(self._ids([FilterClause(property="courier", operator="notContains", value="DHL")]), ["ORD-2"])
        self.assertEqual(self._ids([FilterClause(property="courier", operator="startsWith", value="U")]), ["ORD-2"])
        self.assertEqual(self._ids([FilterClause(property="courier", operator="endsWith", value="HL")]), ["ORD-1"])
        self.assertEqual(self._ids([FilterClause(property="status", operator="contains", value="LIVER")]), ["ORD-2", "ORD-4"])

    def test_blank_and_present(self):
        self.assertEqual(self._ids([FilterClause(property="courier", operator="isBlank")]), ["ORD-3"])
        self.assertEqual(
            self._ids([FilterClause(property="courier", operator="isPresent")]),
            ["ORD-1", "ORD-2", "ORD-4"],
        )

    def test_epoch_millisecond_column_compares_dates(self):
        ids = self._ids([FilterClause(property="updatedAt", operator="isAfter", value="2026-02-26")])
        self.assertEqual(ids, ["ORD-4"])
        ids = self._ids([FilterClause(property="updatedAt", operator="isBefore", value="2026-02-26")])
        self.assertEqual(ids, ["ORD-1"])

    def test_unknown_column_is_skipped(self):
        ids = self._ids([FilterClause(property="secret", operator="equals", value="x")])
        self.assertEqual(ids, ["ORD-1", "ORD-2", "ORD-3", "ORD-4"])

    def test_unknown_operator_follows_policy(self):
        filters = [FilterClause(property="status", operator="oneOf", value="x")]
        self.assertEqual(len(self._ids(filters, on_unknown_operator="skip")), 4)
        with self.assertRaises(UnknownOperatorError):
            self._ids(filters, on_unknown_operator="raise")

    def test_not_equal_coerces_value_to_column_type(self):
        ids = self._ids([FilterClause(property="totalAmount", operator="notEqual", value="124.5")])
        self.assertEqual(ids, ["ORD-1", "ORD-4"])

    def test_clause_without_value_follows_policy(self):
        filters = [FilterClause(property="courier", operator="contains")]
        self.assertEqual(len(self._ids(filters, on_unknown_operator="skip")), 4)
        with self.assertRaises(MissingFilterValueError):
            self._ids(filters, on_unknown_operator="raise")

    def test_like_wildcards_match_literally(self):
        for operator, value in (
            ("contains", "_"),
            ("contains", "0%"),
            ("startsWith", "401_"),
            ("endsWith", "%"),
            ("notContains", "_"),
        ):
            filters = [FilterClause(property="name", operator=operator, value=value)]
            with Session(self.engine) as session:
                q = apply_filter_clauses(session.query(_ProductRow), _ProductRow, filters)
                sql_ids = [row.id for row in q.order_by(_ProductRow.id.asc()).all()]
            memory_ids = [row["id"] for row in apply_filters(_PRODUCT_ROWS, filters)]
            self.assertEqual(sql_ids, memory_ids, (operator, value))
        self.assertEqual(
            self._product_ids(FilterClause(property="name", operator="contains", value="_")),
            ["P-1"],
        )
        self.assertEqual(
            self._product_ids(FilterClause(property="name", operator="contains", value="0%")),
            ["P-3"],
        )

    def test_query_text_wildcards_match_literally(self):
        with Session(self.engine) as session:
            underscore = run_sql_query(session, _ProductRow, {"query": "1_1"}, PRODUCTS)
            percent = run_sql_query(session, _ProductRow, {"query": "%"}, PRODUCTS)
        self.assertEqual([row["id"] for row in underscore.data], ["P-1"])
        self.assertEqual([row["id"] for row in percent.data], ["P-3"])

    def _product_ids(self, clause):
        with Session(self.engine) as session:
            q = apply_filter_clauses(session.query(_ProductRow), _ProductRow, [clause])
            return [row.id for row in q.order_by(_ProductRow.id.asc()).all()]

    def test_run_sql_query_pages_and_counts(self):
        descriptor = QueryDescriptor(
            query="ord",
            view="delivered",
            sort_by="totalAmount",
            sort_dir="desc",
            page=0,
            rows_per_page=1,
        )
        with Session(self.engine) as session:
            result = run_sql_query(session, _OrderRow, descriptor, ORDERS)
        self.assertEqual(result.count, 2)
        self.assertEqual([row["id"] for row in result.data], ["ORD-2"])
        self.assertEqual(result.data[0]["totalAmount"], 124.5)

    def test_run_sql_query_flag_views(self):
        with Session(self.engine) as session:
            result = run_sql_query(session, _CustomerRow, {"view": "orderedRecently"}, CUSTOMERS)
        self.assertEqual([row["id"] for row in result.data], ["C-2"])

    def test_run_sql_query_unknown_views(self):
        with Session(self.engine) as session:
            orders = run_sql_query(session, _OrderRow, {"view": "bogus"}, ORDERS)
            customers = run_sql_query(session, _CustomerRow, {"view": "name"}, CUSTOMERS)
            with self.assertRaises(UnknownViewError):
                run_sql_query(session, _OrderRow, {"view": "bogus"}, ORDERS, strict_views=True)
        self.assertEqual(orders.count, 0)
        self.assertEqual(customers.count, 2)

    def test_run_sql_query_sort_puts_nulls_last(self):
        descriptor = QueryDescriptor(sort_by="updatedAt", sort_dir="asc")
        with Session(self.engine) as session:
            result = run_sql_query(session, _OrderRow, descriptor, ORDERS)
        self.assertEqual([row["id"] for row in result.data], ["ORD-1", "ORD-4", "ORD-2", "ORD-3"])


if __name__ == "__main__":
    unittest.main()

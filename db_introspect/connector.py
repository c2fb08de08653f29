"""Dialect-independent schema introspection."""

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, List, Optional, Tuple

from .database.base import DialectDriver
from .database.models import Column, IntrospectionResult, Relation, Table

logger = logging.getLogger(__name__)

DriverFactory = Callable[[], DialectDriver]


class Connector:
    """Drives introspection of one schema through a DialectDriver.

    Example usage:
        connector = Connector(PostgresDriver(client))
        result = connector.introspect("public")

    With max_workers > 1 the per-table fetches run on a thread pool. When a
    driver_factory is given every worker thread gets its own driver (and
    thereby its own connection); otherwise the shared driver is used and
    its client must tolerate concurrent use.
    """

    def __init__(
        self,
        driver: DialectDriver,
        max_workers: int = 1,
        driver_factory: Optional[DriverFactory] = None,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.driver = driver
        self.max_workers = max_workers
        self.driver_factory = driver_factory
        self._local = threading.local()

    def list_schemas(self) -> List[str]:
        """Get all user schemas (reserved schemas excluded)."""
        schemas = self.driver.get_schemas()
        return [s for s in schemas if not self.driver.is_reserved_schema(s)]

    def list_tables(self, schema: str) -> List[str]:
        """Get all table names of a schema in lexicographic order."""
        return sorted(self.driver.get_tables(schema))

    def introspect(self, schema: str) -> IntrospectionResult:
        """Introspect a schema and return its normalized structure.

        Raises:
            QueryFailure: If any catalog query fails. No partial result is
                returned in that case.
        """
        table_names = self.list_tables(schema)
        logger.debug("Introspecting %d tables in schema %s", len(table_names), schema)

        if self.max_workers > 1 and len(table_names) > 1:
            fetched = self._fetch_parallel(schema, table_names)
        else:
            fetched = [self._fetch_table(self.driver, schema, name) for name in table_names]

        tables: List[Table] = []
        relations: List[Relation] = []
        for table, table_relations in fetched:
            tables.append(table)
            relations.extend(table_relations)

        result = self.driver.finalize(schema, tables, relations)

        partial = result.partial_columns()
        logger.info(
            "Introspected schema %s: %d tables, %d relations, %d unmapped columns",
            schema, len(result.tables), len(result.relations), len(partial),
        )
        return result

    def _fetch_parallel(self, schema: str, table_names: List[str]) -> List[Tuple[Table, List[Relation]]]:
        """Fetch tables on a bounded pool and merge them in table-name order."""
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="introspect")
        futures: Dict[Future, str] = {}
        try:
            for name in table_names:
                futures[executor.submit(self._fetch_in_worker, schema, name)] = name

            done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
            failed = [f for f in done if f.exception() is not None]
            if failed:
                for future in not_done:
                    future.cancel()
                first = min(failed, key=lambda f: table_names.index(futures[f]))
                raise first.exception()

            by_name = {futures[f]: f.result() for f in done}
            return [by_name[name] for name in table_names]
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _fetch_in_worker(self, schema: str, table_name: str) -> Tuple[Table, List[Relation]]:
        return self._fetch_table(self._worker_driver(), schema, table_name)

    def _worker_driver(self) -> DialectDriver:
        if self.driver_factory is None:
            return self.driver
        driver = getattr(self._local, "driver", None)
        if driver is None:
            driver = self.driver_factory()
            self._local.driver = driver
        return driver

    def _fetch_table(self, driver: DialectDriver, schema: str, table_name: str) -> Tuple[Table, List[Relation]]:
        """Fetch and assemble one table together with its outgoing relations."""
        logger.debug("Fetching table %s.%s", schema, table_name)

        raw_columns = driver.get_columns(schema, table_name)
        indices = [i for i in driver.get_indices(schema, table_name) if i.table_name == table_name]
        comments = driver.get_column_comments(schema, table_name)
        table_comment = driver.get_table_comment(schema, table_name)
        relations = driver.get_relations(schema, table_name)

        pk_columns = {f for i in indices if i.is_primary_key for f in i.fields}
        unique_columns = {i.unique_column for i in indices if i.unique_column is not None}

        columns = []
        for raw in raw_columns:
            is_primary_key = raw.name in pk_columns
            mapping = driver.map_type(raw.data_type, raw.name, is_primary_key)
            if not mapping.is_mapped:
                logger.warning("Column %s.%s: %s", table_name, raw.name, mapping.error)

            columns.append(Column(
                name=raw.name,
                data_type=raw.data_type,
                type_identifier=mapping.identifier,
                is_nullable=raw.is_nullable,
                default_value=driver.column_default(raw),
                comment=comments.get(raw.name),
                is_primary_key=is_primary_key,
                is_unique=raw.name in unique_columns,
                type_comment=mapping.comment,
                type_error=mapping.error,
            ))

        table = Table(
            name=table_name,
            columns=tuple(columns),
            indices=tuple(indices),
            comment=table_comment,
        )
        return table, relations

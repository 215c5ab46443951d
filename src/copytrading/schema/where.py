"""
Filter ("where") models.

Every field of a WhereModel is optional. A field left as None places no
constraint on its column; a scalar value is an equality predicate and a
list is a membership predicate. Present predicates are ANDed together.
"""

from dataclasses import dataclass, fields

from psycopg import sql

EQ = "="
IN = "IN"


@dataclass
class WhereModel:
    def predicates(self, schema=None) -> list[tuple[str, str, object]]:
        """
        (column, operator, value) for every field that is set.

        With a schema, values are encoded through the column codecs.
        """
        result = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            column = schema.column(f.name) if schema is not None else None
            if isinstance(value, (list, tuple, set, frozenset)):
                values = list(value)
                if column is not None:
                    values = [column.encode(v) for v in values]
                result.append((f.name, IN, values))
            else:
                if column is not None:
                    value = column.encode(value)
                result.append((f.name, EQ, value))
        return result

    def is_empty(self) -> bool:
        return not self.predicates()

    def to_sql(self, schema=None) -> tuple[sql.Composable, list]:
        """Render a WHERE clause (empty when unconstrained) and its params."""
        clauses = []
        params = []
        for column, op, value in self.predicates(schema):
            if op == IN:
                if not value:
                    # Membership in an empty set matches nothing
                    clauses.append(sql.SQL("FALSE"))
                    continue
                clauses.append(sql.SQL("{} = ANY(%s)").format(sql.Identifier(column)))
            else:
                clauses.append(sql.SQL("{} = %s").format(sql.Identifier(column)))
            params.append(value)

        if not clauses:
            return sql.SQL(""), []
        return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params

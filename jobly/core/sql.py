"""
Helpers for building parameterized SQL.

Column names come from code; every user-supplied value is bound through a
placeholder and never formatted into the query text.
"""

from typing import Any, Dict, List, Mapping, Tuple

from jobly.core.exceptions import ValidationError

# Bind style understood by sqlalchemy.text()
BIND_PLACEHOLDER = ":p{index}"


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    js_to_sql: Mapping[str, str],
    placeholder: str = "${index}",
) -> Tuple[str, List[Any]]:
    """
    Translate a partial update into a SQL SET clause and its values.

    Args:
        data_to_update: Fields to change, in the order they should appear
        js_to_sql: Field names whose column name differs, e.g. {"firstName": "first_name"}
        placeholder: Placeholder template; ``{index}`` is the 1-based position

    Returns:
        (set_clause, values) tuple

    Raises:
        ValidationError: If there is nothing to update

    Example:
        >>> sql_for_partial_update({"firstName": "Aliya", "age": 32}, {"firstName": "first_name"})
        ('"first_name"=$1, "age"=$2', ['Aliya', 32])
    """
    keys = list(data_to_update)
    if not keys:
        raise ValidationError("No data")

    cols = [
        f'"{js_to_sql.get(col_name, col_name)}"={placeholder.format(index=idx)}'
        for idx, col_name in enumerate(keys, start=1)
    ]
    values = [data_to_update[key] for key in keys]

    return ", ".join(cols), values


def bind_params(values: List[Any], start: int = 1) -> Dict[str, Any]:
    """Map positional values onto the names used by BIND_PLACEHOLDER."""
    return {f"p{idx}": value for idx, value in enumerate(values, start=start)}


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class WhereClause:
    """
    Accumulates AND-ed predicates with their bound values.

    Usage:
        where = WhereClause()
        where.contains("name", "net")
        where.add("num_employees >= {}", 10)
        sql = f"SELECT ... FROM companies {where.sql} ORDER BY name"
        db.execute(text(sql), where.params)
    """

    def __init__(self, placeholder: str = BIND_PLACEHOLDER):
        self.placeholder = placeholder
        self.predicates: List[str] = []
        self.values: List[Any] = []

    def add(self, predicate: str, value: Any) -> "WhereClause":
        """Add a predicate whose ``{}`` slot receives the next placeholder."""
        self.values.append(value)
        self.predicates.append(predicate.format(self.placeholder.format(index=len(self.values))))
        return self

    def add_condition(self, predicate: str) -> "WhereClause":
        """Add a predicate that binds no value."""
        self.predicates.append(predicate)
        return self

    def contains(self, column: str, text: str) -> "WhereClause":
        """Case-insensitive substring match on ``column``."""
        return self.add(
            f"lower({column}) LIKE lower({{}}) ESCAPE '\\'",
            f"%{escape_like(text)}%",
        )

    @property
    def sql(self) -> str:
        if not self.predicates:
            return ""
        return "WHERE " + " AND ".join(self.predicates)

    @property
    def params(self) -> Dict[str, Any]:
        return bind_params(self.values)

    def __len__(self) -> int:
        return len(self.predicates)

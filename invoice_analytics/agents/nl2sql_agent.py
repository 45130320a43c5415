"""
Ask-about-data agent: natural language -> SQL -> execute -> plain-language answer.

The LLM only ever sees the invoice schema and a capped slice of the result
rows. Generated SQL must be a single SELECT; anything else is rejected before
it reaches the database.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import text
from sqlalchemy.orm import Session

from invoice_analytics.core.database import Base, SessionLocal
from invoice_analytics.core.llm_client import LLMClient

logger = logging.getLogger(__name__)

SCHEMA_TABLES = ("tenants", "invoices", "invoice_items")
MAX_PROMPT_ROWS = 200
FORBIDDEN_KEYWORDS = ("insert", "update", "delete", "drop", "alter", "truncate", "create", "grant", "revoke")

SQL_SYSTEM_MESSAGE = "You are a PostgreSQL expert that converts natural language questions into SQL."
ANSWER_SYSTEM_MESSAGE = "You are a financial analyst who explains invoice query results in plain language."


class UnsafeQueryError(ValueError):
    pass


class NL2SQLAgent:
    """Natural language -> SQL over the invoice tables."""

    def __init__(self, llm: LLMClient = None):
        self._llm = llm
        self._schema_cache: Optional[Dict[str, List[Dict[str, str]]]] = None

    @property
    def llm(self) -> LLMClient:
        if self._llm is None:
            self._llm = LLMClient()
        return self._llm

    def _load_schema(self) -> Dict[str, List[Dict[str, str]]]:
        if self._schema_cache is None:
            self._schema_cache = {
                name: [
                    {"column": column.name, "type": str(column.type)}
                    for column in Base.metadata.tables[name].columns
                ]
                for name in SCHEMA_TABLES
                if name in Base.metadata.tables
            }
            logger.info(f"[NL2SQL] Loaded schema for {len(self._schema_cache)} tables")
        return self._schema_cache

    def _build_sql_prompt(self, question: str, previous_sql: str = None, previous_error: str = None) -> str:
        prompt = f"""
DATABASE SCHEMA (JSON):
{json.dumps(self._load_schema(), indent=2)}

RULES:
- Write ONE SELECT statement. No INSERT/UPDATE/DELETE or DDL.
- invoices.status is one of 'PAID', 'UNPAID', 'OVERDUE'.
- Exclude archived invoices (is_archived = false) unless the question asks for them.
- Monetary columns are numeric; aggregate them with SUM/AVG as asked.
- Prefer aggregated answers over long row listings.
- Output ONLY SQL. No markdown, no explanation.

User question:
"{question}"
"""
        if previous_error:
            prompt += f"\nThe earlier SQL\n{previous_sql}\nfailed with error: {previous_error}\nRewrite corrected SQL."
        return prompt

    @staticmethod
    def _cleanup_sql(sql: str) -> str:
        """Strip ```sql fences and trailing semicolons."""
        return re.sub(r"```(sql)?", "", sql, flags=re.IGNORECASE).strip().rstrip(";").strip()

    @staticmethod
    def _is_safe_query(sql: str) -> bool:
        lowered = sql.lower()
        if not (lowered.startswith("select") or lowered.startswith("with")):
            return False
        if ";" in lowered:
            return False
        words = set(re.findall(r"[a-z_]+", lowered))
        return not any(keyword in words for keyword in FORBIDDEN_KEYWORDS)

    def _generate_sql(self, question: str, previous_sql: str = None, previous_error: str = None) -> str:
        raw = self.llm.generate(
            self._build_sql_prompt(question, previous_sql, previous_error),
            system_message=SQL_SYSTEM_MESSAGE,
        )
        return self._cleanup_sql(raw)

    def _execute_sql(self, sql: str) -> List[Dict[str, Any]]:
        if not self._is_safe_query(sql):
            raise UnsafeQueryError(f"Unsafe query rejected: {sql}")

        db: Session = SessionLocal()
        try:
            result = db.execute(text(sql))
            return [dict(row) for row in result.mappings()]
        except Exception as e:
            logger.error(f"SQL Execution Error: {e}")
            raise
        finally:
            db.rollback()
            db.close()

    def _summarise(self, question: str, sql: str, rows: List[Dict[str, Any]]) -> str:
        preview = json.dumps(rows[:MAX_PROMPT_ROWS], default=str)
        prompt = f"""
Question: "{question}"
SQL used: {sql}
Result ({len(rows)} rows, showing at most {MAX_PROMPT_ROWS}):
{preview}

Answer the question in two or three sentences using only these results.
"""
        return self.llm.generate(prompt, system_message=ANSWER_SYSTEM_MESSAGE, temperature=0.2)

    async def process_natural_query(self, question: str) -> Dict[str, Any]:
        # LLM round trips and the query are blocking; keep them off the event loop
        sql = await run_in_threadpool(self._generate_sql, question)
        logger.info(f"[NL2SQL] Generated SQL: {sql}")
        try:
            rows = await run_in_threadpool(self._execute_sql, sql)
        except Exception as first_error:
            logger.warning(f"[NL2SQL] First SQL failed: {first_error}")
            sql = await run_in_threadpool(
                self._generate_sql, question, previous_sql=sql, previous_error=str(first_error)
            )
            logger.info(f"[NL2SQL] Retried SQL: {sql}")
            try:
                rows = await run_in_threadpool(self._execute_sql, sql)
            except Exception as second_error:
                message = str(second_error)
                return {
                    "response": f"I couldn't execute the SQL query. Error: {message}",
                    "sql": sql,
                    "rawResult": None,
                    "error": message,
                }

        answer = await run_in_threadpool(self._summarise, question, sql, rows)
        return {
            "response": answer,
            "sql": sql,
            "rawResult": rows,
            "error": None,
        }


nl2sql_agent = NL2SQLAgent()

# src/envcast/core/runtime.py
"""
RuntimeConfig — estado canônico de configuração em runtime.

Este módulo define o **RuntimeConfig**, o detentor do estado mutável que
envolve o núcleo puro (tipos, schema, resolução):

- store: snapshot nome → valor bruto (ex.: `os.environ`)
- schema: schema já filtrado pelo contexto
- context: dimensões da execução (ex.: env, target)
- invocations: última resolução de cada variável solicitada via `get`
- events: log estruturado de eventos

Princípios fundamentais:
- Cada `get` resolve contra um snapshot do store tomado sob lock
- Falhas de cast nunca levantam exceção: `get` retorna None e a trilha
  fica disponível em `invocations` para relatórios
- O store pode ser substituído ou mesclado entre chamadas
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from envcast.core.errors import ConfigError, RuntimeNotInitializedError
from envcast.core.invocation import Invocation, Presence, resolve
from envcast.core.schema.model import Schema, define_schema, variable_required, variables_in_context


logger = logging.getLogger(__name__)

StoreSource = Union[Mapping[Any, Any], Callable[[], Mapping[Any, Any]]]


def _ensure_mapping(store: Any) -> Dict[Any, Any]:
    if not isinstance(store, Mapping):
        raise ConfigError(f"store must be a mapping, got {type(store).__name__}")
    return dict(store)


@dataclass
class RuntimeConfig:
    """
    Estado de configuração de uma aplicação.

    Campos canônicos:
    - schema: schema filtrado pelo contexto (None antes de `init`)
    - context: contexto da execução
    - store: snapshot do store
    - invocations: resolução mais recente por variável
    - events: log estruturado de eventos
    """

    schema: Optional[Schema] = None
    context: Dict[str, Any] = field(default_factory=dict)
    store: Optional[Dict[Any, Any]] = None
    invocations: Dict[Any, Invocation] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    # -----------------------------
    # Inicialização
    # -----------------------------
    def init(
        self,
        *,
        schema: Mapping[Any, Any],
        context: Mapping[str, Any],
        store: Optional[StoreSource] = None,
    ) -> None:
        """Inicializa (ou reinicializa) o estado.

        `schema` pode ser um mapa de specs brutos ou um schema já definido.
        Sem `store`, usa um snapshot de `os.environ`.
        """
        full_schema = define_schema(schema)
        if store is None:
            store = os.environ
        if callable(store) and not isinstance(store, Mapping):
            store = store()

        with self._lock:
            self.context = dict(context)
            self.schema = variables_in_context(full_schema, self.context)
            self.store = _ensure_mapping(store)
            self.invocations = {}
            self.log(level="INFO", message="runtime initialized", variables=len(self.schema))

    def init_once(self, **params: Any) -> None:
        """Como `init`, mas não faz nada se o estado já foi inicializado."""
        with self._lock:
            if self.initialized:
                return
            self.init(**params)

    @property
    def initialized(self) -> bool:
        return self.schema is not None and self.store is not None

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise RuntimeNotInitializedError("RuntimeConfig is not initialized, call init() first")

    # -----------------------------
    # Store
    # -----------------------------
    def set_new_store(self, store: Mapping[Any, Any]) -> None:
        """Define o store apenas se ainda não houver um."""
        with self._lock:
            if self.store is None:
                self.store = _ensure_mapping(store)

    def merge_store(self, new_store: Mapping[Any, Any]) -> None:
        """Mescla `new_store` sobre o store atual (chaves novas sobrescrevem)."""
        self.update_store(lambda current: {**current, **_ensure_mapping(new_store)})

    def update_store(self, update_fn: Callable[[Dict[Any, Any]], Mapping[Any, Any]]) -> None:
        with self._lock:
            self._require_initialized()
            self.store = _ensure_mapping(update_fn(dict(self.store)))
            self.log(level="INFO", message="store updated", size=len(self.store))

    # -----------------------------
    # Resolução
    # -----------------------------
    def get(self, variable_name: Any) -> Any:
        """Resolve a variável, registra a invocação e retorna o valor (ou None)."""
        with self._lock:
            self._require_initialized()
            schema, store, context = self.schema, self.store, self.context

        invocation = resolve(variable_name, context, store, schema)

        with self._lock:
            self.invocations[variable_name] = invocation

        if invocation.in_schema is Presence.NOT_FOUND:
            logger.warning("variable %s is not defined in schema", variable_name)
            self.log(level="WARNING", message="variable not defined in schema", variable=variable_name)
        elif invocation.type_cast_errors:
            self.log(
                level="WARNING",
                message="variable resolved with type cast errors",
                variable=variable_name,
                source=str(invocation.source),
                errors=len(invocation.type_cast_errors),
            )
        else:
            self.log(level="DEBUG", message="variable resolved", variable=variable_name, source=str(invocation.source))

        return invocation.value

    # -----------------------------
    # Grupos
    # -----------------------------
    def _required_in_store(self, group: Any) -> List[bool]:
        with self._lock:
            self._require_initialized()
            return [
                name in self.store
                for name, spec in self.schema.items()
                if variable_required(spec, group, self.context)
            ]

    def any_required_touched(self, group: Any) -> bool:
        """True se alguma variável obrigatória do grupo está presente no store."""
        return any(self._required_in_store(group))

    def all_required_touched(self, group: Any) -> bool:
        """True se todas as variáveis obrigatórias do grupo estão presentes no store."""
        return all(self._required_in_store(group))

    def missing_definitions(self) -> List[Any]:
        """Variáveis solicitadas via `get` que não estão no schema (ordenadas)."""
        with self._lock:
            return sorted(
                (name for name, inv in self.invocations.items() if inv.in_schema is Presence.NOT_FOUND),
                key=str,
            )

    # -----------------------------
    # Relatório
    # -----------------------------
    def report(self, mode: str = "brief", *, emit_ansi: bool = False) -> str:
        """Renderiza o relatório de estado (ver `envcast.report.report_text`)."""
        from envcast.report.report_text import render_report

        with self._lock:
            self._require_initialized()
            return render_report(dict(self.invocations), self.schema, self.context, mode, emit_ansi=emit_ansi)

    # -----------------------------
    # Logging
    # -----------------------------
    def log(self, *, level: str, message: str, **extra: Any) -> None:
        event = {
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        with self._lock:
            self.events.append(event)

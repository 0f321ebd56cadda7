# src/envcast/core/schema/spec.py
"""
Declaração canônica de uma variável do schema.

Campos:
    - cast: TypeRef normalizado (obrigatório)
    - groups: grupos afetados pela variável (obrigatório, não vazio)
    - doc: descrição livre, usada em documentação e templates
    - default: valor padrão em formato bruto (ex.: "10"), passa pelo cast
    - default_lazy: função do contexto que retorna o default bruto ou None
    - required: grupos em que a variável é obrigatória (lista ou função do contexto)
    - context: filtro de contexto, pares (dimensão, valores permitidos)
    - aliases: nomes alternativos tentados, em ordem, quando o nome principal falta
    - template_value_generator: função sem argumentos usada pelo template `.envrc`

Invariantes:
    - `default` e `default_lazy` são mutuamente exclusivos
    - `default` e `required` são mutuamente exclusivos
    - Instâncias são imutáveis; a validação ocorre em `define_schema`
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from envcast.core.types.base import TypeRef


RequiredSpec = Union[Tuple[Any, ...], Callable[[Mapping[str, Any]], Any]]


@dataclass(frozen=True)
class VariableSpec:
    cast: TypeRef
    groups: Tuple[Any, ...]
    doc: Optional[str] = None
    default: Any = None
    default_lazy: Optional[Callable[[Mapping[str, Any]], Any]] = None
    required: Optional[RequiredSpec] = None
    context: Optional[Tuple[Tuple[str, Tuple[Any, ...]], ...]] = None
    aliases: Tuple[Any, ...] = ()
    template_value_generator: Optional[Callable[[], str]] = None

    @property
    def has_default(self) -> bool:
        return self.default is not None or self.default_lazy is not None

    def default_for(self, context: Mapping[str, Any]) -> Any:
        """Default bruto para o contexto, ou None quando não há (ou foi recusado)."""
        if self.default is not None:
            return self.default
        if self.default_lazy is not None:
            return self.default_lazy(context)
        return None

    def required_groups(self, context: Mapping[str, Any]) -> List[Any]:
        if self.required is None:
            return []
        if callable(self.required):
            return list(self.required(context) or [])
        return list(self.required)

    def to_dict(self) -> Dict[str, Any]:
        """Representação serializável (callables são omitidos)."""
        out: Dict[str, Any] = {"cast": str(self.cast), "groups": list(self.groups)}
        if self.doc is not None:
            out["doc"] = self.doc
        if self.default is not None:
            out["default"] = self.default
        if self.required is not None and not callable(self.required):
            out["required"] = list(self.required)
        if self.context is not None:
            out["context"] = {k: list(v) for k, v in self.context}
        if self.aliases:
            out["aliases"] = list(self.aliases)
        return out

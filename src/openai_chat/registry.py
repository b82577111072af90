"""Model capability table used to reject requests before dispatch."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping

CHAT_COMPLETIONS_ENDPOINT = "/chat/completions"
COMPLETIONS_ENDPOINT = "/completions"

# Chat models
GPT4 = "gpt-4"
GPT4_0314 = "gpt-4-0314"
GPT4_0613 = "gpt-4-0613"
GPT4_32K = "gpt-4-32k"
GPT4_32K_0314 = "gpt-4-32k-0314"
GPT4_32K_0613 = "gpt-4-32k-0613"
GPT3_5_TURBO = "gpt-3.5-turbo"
GPT3_5_TURBO_0301 = "gpt-3.5-turbo-0301"
GPT3_5_TURBO_0613 = "gpt-3.5-turbo-0613"
GPT3_5_TURBO_16K = "gpt-3.5-turbo-16k"
GPT3_5_TURBO_16K_0613 = "gpt-3.5-turbo-16k-0613"

# Completion-only models
GPT3_TEXT_DAVINCI_003 = "text-davinci-003"
GPT3_TEXT_DAVINCI_002 = "text-davinci-002"
GPT3_TEXT_DAVINCI_001 = "text-davinci-001"
GPT3_TEXT_CURIE_001 = "text-curie-001"
GPT3_TEXT_BABBAGE_001 = "text-babbage-001"
GPT3_TEXT_ADA_001 = "text-ada-001"
GPT3_DAVINCI_INSTRUCT_BETA = "davinci-instruct-beta"
GPT3_DAVINCI = "davinci"
GPT3_CURIE_INSTRUCT_BETA = "curie-instruct-beta"
GPT3_CURIE = "curie"
GPT3_ADA = "ada"
GPT3_BABBAGE = "babbage"
CODEX_CODE_DAVINCI_002 = "code-davinci-002"
CODEX_CODE_CUSHMAN_001 = "code-cushman-001"
CODEX_CODE_DAVINCI_001 = "code-davinci-001"


def _freeze(table: Mapping[str, Iterable[str]]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({key: frozenset(values) for key, values in table.items()})


@dataclass(frozen=True)
class ModelRegistry:
    """Immutable description of which models may be used where.

    ``disabled_for_endpoints`` maps an endpoint suffix to the models that
    must not be sent to it. ``function_calling`` lists the models that
    accept function declarations.
    """

    disabled_for_endpoints: Mapping[str, FrozenSet[str]] = field(default_factory=lambda: _freeze({}))
    function_calling: FrozenSet[str] = frozenset()

    @classmethod
    def build(
        cls,
        disabled_for_endpoints: Mapping[str, Iterable[str]],
        function_calling: Iterable[str],
    ) -> "ModelRegistry":
        return cls(
            disabled_for_endpoints=_freeze(disabled_for_endpoints),
            function_calling=frozenset(function_calling),
        )

    def endpoint_supports_model(self, endpoint: str, model: str) -> bool:
        return model not in self.disabled_for_endpoints.get(endpoint, frozenset())

    def model_supports_functions(self, model: str) -> bool:
        return model in self.function_calling


DEFAULT_REGISTRY = ModelRegistry.build(
    disabled_for_endpoints={
        COMPLETIONS_ENDPOINT: [
            GPT3_5_TURBO,
            GPT3_5_TURBO_0301,
            GPT3_5_TURBO_0613,
            GPT3_5_TURBO_16K,
            GPT3_5_TURBO_16K_0613,
            GPT4,
            GPT4_0314,
            GPT4_0613,
            GPT4_32K,
            GPT4_32K_0314,
            GPT4_32K_0613,
        ],
        CHAT_COMPLETIONS_ENDPOINT: [
            CODEX_CODE_DAVINCI_002,
            CODEX_CODE_CUSHMAN_001,
            CODEX_CODE_DAVINCI_001,
            GPT3_TEXT_DAVINCI_003,
            GPT3_TEXT_DAVINCI_002,
            GPT3_TEXT_CURIE_001,
            GPT3_TEXT_BABBAGE_001,
            GPT3_TEXT_ADA_001,
            GPT3_TEXT_DAVINCI_001,
            GPT3_DAVINCI_INSTRUCT_BETA,
            GPT3_DAVINCI,
            GPT3_CURIE_INSTRUCT_BETA,
            GPT3_CURIE,
            GPT3_ADA,
            GPT3_BABBAGE,
        ],
    },
    function_calling=[
        GPT4,
        GPT4_0613,
        GPT4_32K,
        GPT4_32K_0613,
        GPT3_5_TURBO,
        GPT3_5_TURBO_0613,
        GPT3_5_TURBO_16K,
        GPT3_5_TURBO_16K_0613,
    ],
)

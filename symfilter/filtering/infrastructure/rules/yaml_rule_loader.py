import re
from pathlib import Path
from typing import Any

import yaml

from symfilter.config.logger_config import logger
from symfilter.filtering.application.ports import RuleLoaderPort
from symfilter.filtering.domain.errors import ConfigurationError, RuleFileError, RuleParseError

_BOOL_TAG = "tag:yaml.org,2002:bool"


class RuleDocumentLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 booleans: only true/false, never yes/no/on/off."""


RuleDocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
RuleDocumentLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class YamlRuleLoader(RuleLoaderPort):
    def load(self, path: str) -> Any:
        try:
            contents = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RuleFileError(f"could not open configuration file: {exc}") from exc
        return self.loads(contents, source=path)

    @staticmethod
    def loads(contents: str, source: str = "<string>") -> Any:
        try:
            documents = list(yaml.load_all(contents, Loader=RuleDocumentLoader))
        except yaml.YAMLError as exc:
            raise RuleParseError(f"could not parse configuration file as YAML: {exc}") from exc
        # Exactly one document per rule file.
        if len(documents) != 1:
            raise ConfigurationError(f"expected a single YAML document, found {len(documents)}")
        logger.debug("Rule document loaded: source={}", source)
        return documents[0]

"""Shared fixtures for core unit tests"""

import pytest

from lecturehub.core.markup.convert import MarkupConverter


SAMPLE_MD = """\
# Heading 1

A paragraph with **bold** text.

## Heading 2

- item one
- item two

```python
print("hello")
```

---

Footer paragraph.
"""


@pytest.fixture(name="converter")
def converter_fixture():
    return MarkupConverter()


@pytest.fixture(name="sample_result")
def sample_result_fixture(converter):
    return converter.convert(SAMPLE_MD)

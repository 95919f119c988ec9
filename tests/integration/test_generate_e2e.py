"""End-to-end tests running the file API over component sources."""

import pytest

from jsdoc_builder.pipeline import GenerateOptions, generate_jsdoc

TSX_SOURCE = """interface Props {
    title: string;
    count?: number;
}

function Component(props: Props) {
    return <div>{props.title}</div>;
}

const ArrowComponent = (props: Props): JSX.Element => {
    return <div>{props.title}</div>;
};

export default Component;
"""

TSX_EXPECTED = """interface Props {
    title: string;
    count?: number;
}

/**
 * @description Component function
 * @param {Props} props
 * @returns {any}
 */
function Component(props: Props) {
    return <div>{props.title}</div>;
}

/**
 * @description ArrowComponent function
 * @param {Props} props
 * @returns {JSX.Element}
 */
const ArrowComponent = (props: Props): JSX.Element => {
    return <div>{props.title}</div>;
};

export default Component;
"""

VUE_SOURCE = """<template>
  <ul>
    <li v-for="item in items" :key="item">{{ format(item) }}</li>
  </ul>
</template>

<script lang="ts">
export default {
  setup() {
    const format = (value: number, unit = 'px') => value + unit;
    async function load(url) {
      const response = await fetch(url);
      return response.ok;
    }
    return { format, load };
  },
};
</script>
"""

VUE_EXPECTED = """<template>
  <ul>
    <li v-for="item in items" :key="item">{{ format(item) }}</li>
  </ul>
</template>

<script lang="ts">
export default {
  setup() {
    /**
     * @description format function
     * @param {number} value
     * @param {string} unit
     * @returns {string}
     */
    const format = (value: number, unit = 'px') => value + unit;
    /**
     * @description load function
     * @param {any} url
     * @returns {Promise<any>}
     */
    async function load(url) {
      const response = await fetch(url);
      return response.ok;
    }
    return { format, load };
  },
};
</script>
"""


@pytest.mark.asyncio
async def test_tsx_component_file(tmp_path):
    path = tmp_path / "Component.tsx"
    path.write_text(TSX_SOURCE)

    assert await generate_jsdoc(path, GenerateOptions(no_ai=True)) is True
    assert path.read_text() == TSX_EXPECTED

    assert await generate_jsdoc(path, GenerateOptions(no_ai=True)) is False
    assert path.read_text() == TSX_EXPECTED


@pytest.mark.asyncio
async def test_vue_component_file(tmp_path):
    path = tmp_path / "List.vue"
    path.write_text(VUE_SOURCE)

    assert await generate_jsdoc(path) is True
    assert path.read_text() == VUE_EXPECTED

    assert await generate_jsdoc(path) is False

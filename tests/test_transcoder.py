from __future__ import annotations

import numpy as np
import pytest

from clickseg.config.schema import PromptConfig
from clickseg.errors import PromptError
from clickseg.prompt.transcoder import transcode


def test_single_click_gets_padding_point():
    prompt = transcode(500, 300, 512, 1024)

    assert prompt.point_coords.shape == (1, 2, 2)
    assert prompt.point_coords.dtype == np.float32
    assert prompt.point_coords.tolist() == [[[500.0, 300.0], [0.0, 0.0]]]
    assert prompt.point_labels.shape == (1, 2)
    assert prompt.point_labels.tolist() == [[0.0, -1.0]]


def test_fixed_slots_are_filled():
    prompt = transcode(1.5, 2.5, 10, 20)

    assert prompt.mask_input.shape == (1, 1, 256, 256)
    assert not prompt.mask_input.any()
    assert prompt.has_mask_input.shape == (1,)
    assert prompt.has_mask_input.tolist() == [0.0]


def test_orig_im_size_is_canvas_height_then_width():
    prompt = transcode(500, 300, 512, 1024)

    assert prompt.orig_im_size.shape == (2,)
    assert prompt.orig_im_size.dtype == np.float32
    assert prompt.orig_im_size.tolist() == [512.0, 1024.0]


def test_click_is_not_rescaled():
    prompt = transcode(1023, 511, 512, 1024)

    assert prompt.click == (1023.0, 511.0)


def test_feeds_carry_all_prompt_keys():
    feeds = transcode(3, 4, 8, 8).to_feeds()

    assert set(feeds) == {
        "point_coords",
        "point_labels",
        "mask_input",
        "has_mask_input",
        "orig_im_size",
    }


def test_point_label_is_configurable():
    prompt = transcode(3, 4, 8, 8, PromptConfig(point_label=1))

    assert prompt.point_labels.tolist() == [[1.0, -1.0]]


def test_rejects_empty_canvas():
    with pytest.raises(PromptError):
        transcode(0, 0, 0, 10)


@pytest.mark.parametrize(("x", "y"), [(float("nan"), 1.0), (1.0, float("inf"))])
def test_rejects_non_finite_click(x, y):
    with pytest.raises(PromptError, match="finite"):
        transcode(x, y, 8, 8)

"""
Frame sequence flow pipeline.

Walks a sequence of frames, estimates Lucas-Kanade flow for every
consecutive pair (previous, current) and writes the flow as arrows drawn on
the previous frame. Output images are named after the earlier frame index,
and can be assembled into a video with e.g.::

    ffmpeg -framerate 30 -i frames_output/flow_%04d.jpg -c:v libx264 \\
        -pix_fmt yuv420p output.mp4

The pipeline stops at the first missing or undecodable frame, at the first
frame with an unsupported channel count, at the first frame whose size
differs from the sequence, or after ``max_frames`` frames. Stops are
reported in the returned PipelineResult; outputs written before the stop
are kept.
"""
import logging
import os
from collections import namedtuple
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from lk_flow.io.flo_io import write_flo
from lk_flow.io.frames import (
    FrameDecodeError, FrameFormatError, PillowFrameCodec, JPEG_QUALITY
)
from lk_flow.methods.base import parameter_items
from lk_flow.methods.config import load_of_method
from lk_flow.viz.overlay import draw_flow_arrows, ARROW_COLOR, ARROW_STRIDE


logger = logging.getLogger(__name__)

OUTPUT_PATTERN = 'flow_{:04d}.jpg'
MAX_FRAMES = 100


class StopReason(Enum):
    """Why the pipeline stopped."""
    END_OF_SEQUENCE = 'end_of_sequence'
    MAX_FRAMES = 'max_frames'
    FORMAT_ERROR = 'format_error'
    SIZE_MISMATCH = 'size_mismatch'


# The frame currently held as "previous"
FrameSlot = namedtuple('FrameSlot', ['index', 'intensity', 'rgb'])


@dataclass
class PipelineResult:
    """Summary of one pipeline run.

    ``stop_index`` is the index of the frame that ended the run: the frame
    that failed to decode or mismatched in size, or the last frame accepted
    under the frame cap. It is None when the frame iterable itself ran out,
    as a FrameSequence does at its first missing file.
    """
    frames_decoded: int = 0
    pairs_processed: int = 0
    outputs: List[str] = field(default_factory=list)
    stop_reason: StopReason = StopReason.END_OF_SEQUENCE
    stop_index: Optional[int] = None

    @property
    def ok(self) -> bool:
        """True when the run ended normally rather than on bad input."""
        return self.stop_reason in (StopReason.END_OF_SEQUENCE, StopReason.MAX_FRAMES)


class FlowPipeline:
    """Sequential flow estimation and overlay rendering over a frame sequence."""

    def __init__(self, codec=None, method='lk'):
        self.codec = codec if codec is not None else PillowFrameCodec()
        self.flow = load_of_method(method)
        self.max_frames = MAX_FRAMES
        self.stride = ARROW_STRIDE
        self.arrow_color = ARROW_COLOR
        self.quality = JPEG_QUALITY
        self.output_pattern = OUTPUT_PATTERN
        self.save_flo = False
        self.save_quiver = False

    def parse_input_parameter(self, params):
        """Set pipeline or flow parameters from a dict or key-value list.

        Keys naming a pipeline attribute (``stride``, ``max_frames``, ...)
        set it on the pipeline; keys naming a flow attribute
        (``window_size``, ``det_threshold``) are passed to the estimator.
        Unknown keys are ignored.
        """
        for key, val in parameter_items(params):
            if key in ('codec', 'flow'):
                continue
            if hasattr(self, key):
                setattr(self, key, val)
            elif hasattr(self.flow, key):
                setattr(self.flow, key, val)

    def run(self, frames, output_dir):
        """Process a frame sequence.

        Args:
            frames: Iterable of (index, path) pairs, e.g. a FrameSequence.
            output_dir: Directory receiving the overlay images.

        Returns:
            PipelineResult describing what was processed and why it stopped.
        """
        if self.max_frames is not None and self.max_frames < 1:
            raise ValueError(f"max_frames must be at least 1, got {self.max_frames}")

        os.makedirs(output_dir, exist_ok=True)
        result = PipelineResult()
        previous = None

        for index, path in frames:
            try:
                intensity = self.codec.decode(path)
            except FrameFormatError as e:
                logger.error("Stopping at frame %d: %s", index, e)
                self._stop(result, StopReason.FORMAT_ERROR, index)
                break
            except FrameDecodeError as e:
                logger.info("No more frames or error at frame %d: %s", index, e)
                self._stop(result, StopReason.END_OF_SEQUENCE, index)
                break

            if previous is not None and intensity.shape != previous.intensity.shape:
                logger.error(
                    "Frame size mismatch at frame %d: %dx%d, sequence is %dx%d",
                    index, intensity.shape[1], intensity.shape[0],
                    previous.intensity.shape[1], previous.intensity.shape[0],
                )
                self._stop(result, StopReason.SIZE_MISMATCH, index)
                break

            try:
                rgb = self.codec.decode_rgb(path)
            except FrameDecodeError as e:
                logger.info("Could not load frame %d for visualization: %s", index, e)
                self._stop(result, StopReason.END_OF_SEQUENCE, index)
                break

            current = FrameSlot(index, intensity, rgb)
            result.frames_decoded += 1

            if previous is not None:
                result.outputs.append(self._process_pair(previous, current, output_dir))
                result.pairs_processed += 1

            # Current frame takes over the slot, the old previous frame is dropped
            previous = current

            if self.max_frames is not None and result.frames_decoded >= self.max_frames:
                logger.info("Reached frame limit of %d", self.max_frames)
                self._stop(result, StopReason.MAX_FRAMES, index)
                break

        logger.info("Processed %d frames, wrote %d flow images",
                    result.frames_decoded, result.pairs_processed)
        return result

    @staticmethod
    def _stop(result, reason, index):
        result.stop_reason = reason
        result.stop_index = index

    def _process_pair(self, previous, current, output_dir):
        """Estimate flow for one frame pair and write its overlay."""
        uv = self.flow.compute_flow(previous.intensity, current.intensity)
        vis = draw_flow_arrows(previous.rgb, uv, stride=self.stride,
                               color=self.arrow_color)

        out_path = os.path.join(output_dir, self.output_pattern.format(previous.index))
        self.codec.encode(out_path, vis, self.quality)

        stem = os.path.splitext(out_path)[0]
        if self.save_flo:
            write_flo(uv, stem + '.flo')
        if self.save_quiver:
            from lk_flow.viz.plot_flow import save_flow_plot
            save_flow_plot(uv, stem + '_quiver.png', background=previous.rgb,
                           step=self.stride)

        logger.info("Frames %d -> %d: wrote %s", previous.index, current.index, out_path)
        return out_path

"""Optical flash finder: clusters the optical hits of each frame into flashes.

Each frame is processed independently with its own list of hits, its own
accumulators and its own outputs. The association between flashes and hits
is built with frame-local hit indexes; the offset into the list of hits of
the whole event is only applied when frame results are concatenated.
"""

from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from opflash.clock import OpticalClock
from opflash.data import Flash, Hit, Waveform
from opflash.geo import Geometry
from opflash.reco import PulseRecoBase, ThresholdPulseReco
from opflash.utils.logger import logger

from .accumulator import DualAccumulator
from .assign import assign_hits_to_flashes
from .build import build_flash
from .hit import construct_hit
from .late_light import LATE_LIGHT_CUTOFF, remove_late_light
from .refine import refine_hits_in_flash

__all__ = ["FlashFinder", "FlashFinderResult"]


@dataclass
class FlashFinderResult:
    """Output of the flash finder.

    Attributes
    ----------
    hits : List[Hit]
        Hits, in the order they were produced
    flashes : List[Flash]
        Flashes, ordered in time within each frame
    assoc : List[np.ndarray]
        Indexes (into `hits`) of the hits which make up each flash
    """

    hits: List[Hit] = field(default_factory=list)
    flashes: List[Flash] = field(default_factory=list)
    assoc: List[np.ndarray] = field(default_factory=list)

    def extend(self, other: "FlashFinderResult"):
        """Append the result of another frame, offsetting its indexes.

        The objects of `other` are left untouched, shifted copies of them
        are appended instead.

        Parameters
        ----------
        other : FlashFinderResult
            Result of one frame, with frame-local indexes
        """
        hit_offset, flash_offset = len(self.hits), len(self.flashes)
        for hit in other.hits:
            self.hits.append(replace(hit))
            self.hits[-1].shift_indexes(hit_offset)
        for flash in other.flashes:
            self.flashes.append(replace(flash))
            self.flashes[-1].shift_indexes(flash_offset)

        self.assoc.extend(hit_ids + hit_offset for hit_ids in other.assoc)


class FlashFinder:
    """Finds optical flashes, one frame at a time.

    Typical configuration should look like:

    .. code-block:: yaml

        flash:
          bin_width: 10
          hit_threshold: 3.0
          flash_threshold: 100.0
          width_tolerance: 0.5
          trig_coinc: 2.5
          spe_size: 20.0

    Attributes
    ----------
    geometry : Geometry
        Optical geometry
    clock : OpticalClock
        Optical clock
    pulse_reco : PulseRecoBase
        Algorithm used to find pulses in the waveforms
    """

    def __init__(
        self,
        geometry: Geometry,
        clock: OpticalClock,
        bin_width: int = 10,
        hit_threshold: float = 3.0,
        flash_threshold: float = 100.0,
        width_tolerance: float = 0.5,
        trig_coinc: float = 2.5,
        frame_margin: int = 3000,
        spe_size: Union[float, Sequence[float]] = 20.0,
        channel_map: Optional[Dict[int, int]] = None,
        late_light_cutoff: float = LATE_LIGHT_CUTOFF,
        pulse_reco: Optional[PulseRecoBase] = None,
    ):
        """Initialize the flash finder.

        Parameters
        ----------
        geometry : Geometry
            Optical geometry (channel count, positions, wire planes)
        clock : OpticalClock
            Optical clock used to convert ticks into times
        bin_width : int, default 10
            Width of the accumulator bins in ticks
        hit_threshold : float, default 3.0
            Minimum pulse amplitude (ADC) to produce a hit
        flash_threshold : float, default 100.0
            Minimum number of PE of a flash
        width_tolerance : float, default 0.5
            Scale factor applied to the hit and flash half-widths when
            deciding whether a hit overlaps with a refined flash
        trig_coinc : float, default 2.5
            Half-width of the trigger coincidence window in microseconds
        frame_margin : int, default 3000
            Number of ticks added to the accumulators beyond the frame length,
            to cover waveforms which extend past the end of the frame
        spe_size : Union[float, List[float]], default 20.0
            Single photoelectron amplitude (ADC), either shared by all channels
            or one value per channel
        channel_map : Dict[int, int], optional
            Map from device channel to normalized channel. If not specified,
            device channels are used as is.
        late_light_cutoff : float, default 3.0
            Significance below which a flash is attributed to late light
        pulse_reco : PulseRecoBase, optional
            Pulse finding algorithm. Defaults to a :class:`ThresholdPulseReco`.
        """
        if bin_width <= 0:
            raise ValueError(f"The bin width must be positive, got {bin_width}.")
        if flash_threshold <= 0.0:
            raise ValueError(
                f"The flash threshold must be positive, got {flash_threshold}."
            )
        if width_tolerance < 0.0:
            raise ValueError(
                f"The width tolerance must not be negative, got {width_tolerance}."
            )

        self.geometry = geometry
        self.clock = clock
        self.bin_width = bin_width
        self.hit_threshold = hit_threshold
        self.flash_threshold = flash_threshold
        self.width_tolerance = width_tolerance
        self.trig_coinc = trig_coinc
        self.frame_margin = frame_margin
        self.late_light_cutoff = late_light_cutoff
        self.pulse_reco = pulse_reco if pulse_reco is not None else ThresholdPulseReco()

        # Broadcast the single PE calibration to all channels
        self.spe_size = np.broadcast_to(
            np.asarray(spe_size, dtype=np.float64), (geometry.num_channels,)
        )
        if np.any(self.spe_size <= 0.0):
            raise ValueError("The single PE amplitudes must all be positive.")

        # YAML keys are parsed as integers, but may come in as strings
        self.channel_map = None
        if channel_map is not None:
            self.channel_map = {int(k): int(v) for k, v in channel_map.items()}

    def __call__(self, waveforms: Iterable[Waveform]) -> FlashFinderResult:
        """Alias for :meth:`run`."""
        return self.run(waveforms)

    def run(self, waveforms: Iterable[Waveform]) -> FlashFinderResult:
        """Finds the flashes in all the frames of a set of waveforms.

        Parameters
        ----------
        waveforms : Iterable[Waveform]
            Optical waveforms, possibly spanning several frames

        Returns
        -------
        FlashFinderResult
            Hits, flashes and hit associations of all frames
        """
        by_frame = defaultdict(list)
        for waveform in waveforms:
            by_frame[waveform.frame].append(waveform)

        result = FlashFinderResult()
        for frame in sorted(by_frame):
            result.extend(self.process_frame(frame, by_frame[frame]))

        return result

    def run_hits(self, hits: Iterable[Hit]) -> FlashFinderResult:
        """Finds the flashes in all the frames of a set of existing hits.

        Parameters
        ----------
        hits : Iterable[Hit]
            Reconstructed optical hits, possibly spanning several frames

        Returns
        -------
        FlashFinderResult
            Hits, flashes and hit associations of all frames
        """
        by_frame = defaultdict(list)
        for hit in hits:
            by_frame[hit.frame].append(hit)

        result = FlashFinderResult()
        for frame in sorted(by_frame):
            result.extend(self.process_hits(frame, by_frame[frame]))

        return result

    def process_frame(
        self, frame: int, waveforms: Iterable[Waveform]
    ) -> FlashFinderResult:
        """Reconstructs hits and flashes from the waveforms of one frame.

        Parameters
        ----------
        frame : int
            Frame number
        waveforms : Iterable[Waveform]
            Optical waveforms of this frame

        Returns
        -------
        FlashFinderResult
            Hits, flashes and hit associations of the frame (local indexes)
        """
        frame_ticks = self.clock.frame_ticks
        num_bins = (frame_ticks + self.frame_margin + self.bin_width) // self.bin_width
        accumulators = DualAccumulator(num_bins, self.bin_width, self.flash_threshold)

        hits = []
        for waveform in waveforms:
            # Check that the channel is known
            channel = self.map_channel(waveform.channel)
            if channel is None:
                continue

            # Check that the waveform starts within the frame
            time_slice = waveform.time_slice
            if time_slice < 0 or time_slice > frame_ticks:
                logger.warning(
                    "Time slice %d of channel %d is outside the countable "
                    "region [0, %d], skipping.",
                    time_slice,
                    channel,
                    frame_ticks,
                )
                continue

            for pulse in self.pulse_reco.reco(waveform.adcs):
                tick = pulse.t_max + time_slice
                if not accumulators.contains(tick):
                    logger.warning(
                        "Pulse at tick %d of channel %d is outside of the "
                        "accumulator range, skipping.",
                        tick,
                        channel,
                    )
                    continue

                hit = construct_hit(
                    pulse,
                    channel,
                    time_slice,
                    frame,
                    self.clock,
                    self.spe_size[channel],
                    self.hit_threshold,
                    hit_id=len(hits),
                )
                if hit is None:
                    continue

                hits.append(hit)
                accumulators.fill(tick, hit.id, hit.pe)

        return self.cluster(frame, hits, accumulators)

    def process_hits(self, frame: int, hits: Sequence[Hit]) -> FlashFinderResult:
        """Finds the flashes in the existing hits of one frame.

        The hits are binned in absolute time, starting from the earliest hit of
        the frame. The bin width is converted from ticks to microseconds.

        Parameters
        ----------
        frame : int
            Frame number
        hits : Sequence[Hit]
            Hits of this frame

        Returns
        -------
        FlashFinderResult
            Hits, flashes and hit associations of the frame (local indexes)
        """
        # Drop the hits which do not belong to the geometry
        valid_hits = []
        for hit in hits:
            if not self.geometry.is_valid_channel(hit.channel):
                logger.warning(
                    "Unrecognized channel number %d, skipping hit at %.3f us.",
                    hit.channel,
                    hit.peak_time,
                )
                continue
            valid_hits.append(hit)

        hits = [replace(hit, id=i, frame=frame) for i, hit in enumerate(valid_hits)]
        if not hits:
            return FlashFinderResult()

        times = np.array([h.peak_time_abs for h in hits])
        min_time, max_time = np.min(times), np.max(times)
        bin_width = self.bin_width * self.clock.tick_period
        num_bins = int((max_time - min_time) // bin_width) + 2
        accumulators = DualAccumulator(num_bins, bin_width, self.flash_threshold)
        for hit in hits:
            accumulators.fill(hit.peak_time_abs, hit.id, hit.pe, origin=min_time)

        return self.cluster(frame, hits, accumulators)

    def cluster(
        self, frame: int, hits: List[Hit], accumulators: DualAccumulator
    ) -> FlashFinderResult:
        """Turns filled accumulators into flashes.

        Parameters
        ----------
        frame : int
            Frame number
        hits : List[Hit]
            Hits of this frame
        accumulators : DualAccumulator
            Accumulators filled with the hits of this frame

        Returns
        -------
        FlashFinderResult
            Hits, flashes and hit associations of the frame (local indexes)
        """
        # Claim hits into coarse flashes, largest first
        coarse = assign_hits_to_flashes(accumulators, hits, self.flash_threshold)

        # Split each coarse flash into time-compatible sub-flashes
        refined = []
        for hit_ids in coarse:
            refined.extend(
                refine_hits_in_flash(
                    hit_ids, hits, self.width_tolerance, self.flash_threshold
                )
            )

        # Build the flash objects, remove the late light
        trigger_frame = self.clock.trigger_frame
        flashes = [
            build_flash(
                hit_ids, hits, self.geometry, trigger_frame, frame, self.trig_coinc
            )
            for hit_ids in refined
        ]
        flashes, assoc = remove_late_light(flashes, refined, self.late_light_cutoff)
        for i, flash in enumerate(flashes):
            flash.id = i
            if flash.on_beam_time:
                logger.debug("On-beam flash with time %.3f us", flash.time)

        logger.debug(
            "Frame %d: %d hits, %d coarse, %d refined, %d flashes after "
            "late light removal",
            frame,
            len(hits),
            len(coarse),
            len(refined),
            len(flashes),
        )

        return FlashFinderResult(
            hits=hits,
            flashes=flashes,
            assoc=[np.asarray(hit_ids, dtype=np.int64) for hit_ids in assoc],
        )

    def map_channel(self, device_channel: int) -> Optional[int]:
        """Converts a device channel to a normalized channel.

        Parameters
        ----------
        device_channel : int
            Readout channel number

        Returns
        -------
        int
            Normalized channel, or `None` if the channel is not recognized
        """
        if self.channel_map is not None:
            if device_channel not in self.channel_map:
                logger.warning(
                    "Device channel %d is not in the channel map, ignoring "
                    "its pulses.",
                    device_channel,
                )
                return None
            channel = self.channel_map[device_channel]
        else:
            channel = device_channel

        if not self.geometry.is_valid_channel(channel):
            logger.warning(
                "Unrecognized channel number %d, ignoring its pulses.", channel
            )
            return None

        return channel

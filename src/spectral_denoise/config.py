"""Configuration constants for spectral noise reduction."""

# Audio Configuration
DEFAULT_SAMPLE_RATE = 48000  # Hz, assumed when the caller does not say otherwise
DEFAULT_FRAME_SIZE = 1024  # samples per analysis frame
STANDARD_FRAME_SIZES = (512, 1024, 2048, 4096)  # other powers of two warn
DEFAULT_HOP_DIVISOR = 2  # hop = frame_size // 2 when not configured

# Default NoiseReductionConfig values
DEFAULT_ALGORITHM = "wiener_filter"
DEFAULT_STRENGTH = 0.8  # 0.0 to 1.0
DEFAULT_SMOOTHING_FACTOR = 0.98  # 0.0 to 1.0
DEFAULT_NOISE_LEARNING_DURATION = 2.0  # seconds

# Frame Pipeline
WINDOW_COVERAGE_FLOOR = 1e-2  # Minimum window weight used for OLA normalisation

# Noise Profile Builder
NOISE_LEARNING_FRACTION = 0.1  # Leading fraction of frames assumed noise-only
NOISE_FLOOR_PERCENTILE = 0.1  # Rank of the fingerprint used as noise floor
LOW_BAND_EDGE_HZ = 1000.0  # Upper edge of the low perceptual band
MID_BAND_EDGE_HZ = 4000.0  # Upper edge of the mid perceptual band
LOW_BAND_WEIGHT = 0.8  # Less aggressive in low frequencies
MID_BAND_WEIGHT = 1.2  # More aggressive in mid frequencies
HIGH_BAND_WEIGHT = 1.0  # Standard for high frequencies
DEFAULT_PROFILE_NAME = "Auto-generated Noise Profile"
DEFAULT_PROFILE_DESCRIPTION = "Automatically created from audio analysis"

# Adaptive parameters attached to generated profiles
DEFAULT_SENSITIVITY = 0.7
DEFAULT_AGGRESSIVENESS = 0.6
DEFAULT_PRESERVATION_LEVEL = 0.8

# Spectral Subtraction
SPECTRAL_SUBTRACTION_ALPHA = 2.0  # Over-subtraction factor
SPECTRAL_SUBTRACTION_BETA = 0.01  # Spectral floor fraction

# Wiener Filter
WIENER_SMOOTHING = 0.98  # Decision-directed prior SNR smoothing
WIENER_GAIN_FLOOR = 0.1  # Minimum gain, avoids total muting

# Adaptive Filter
ADAPTIVE_FILTER_FLOOR = 0.1  # Minimum fraction of the input magnitude

# Wavelet-style Thresholding
WAVELET_MAD_MULTIPLIER = 3.0  # median + 3 * MAD threshold
WAVELET_FLOOR = 0.05  # Minimum fraction of the input magnitude

# Composite ("ai_enhanced") chain
ENHANCED_SUBTRACTION_SCALE = 0.5  # Strength multiplier for the subtraction pass

# Numerical guards
EPSILON = 1e-10

# Quality Assessment
QUALITY_ANALYSIS_WINDOW = 1024  # samples, non-overlapping analysis windows
NOISE_DOMINANCE_FACTOR = 2.0  # Bins below 2x the profile reference count as noise
TRANSIENT_WINDOW = 512  # samples
TRANSIENT_HOP = 256  # samples, half-overlapping windows
TRANSIENT_ENERGY_RATIO = 2.0  # Energy ratio threshold for an onset
TRANSIENT_TOLERANCE_SEC = 0.01  # 10ms matching tolerance
ARTIFACT_NORMALIZATION = 0.1  # Spectral difference mapped to artifact level 1.0

# Progress checkpoints (percent)
PROGRESS_ANALYSIS = 10
PROGRESS_PROFILE = 20
PROGRESS_ALGORITHM = 40
PROGRESS_SYNTHESIS = 80
PROGRESS_METRICS = 90
PROGRESS_DONE = 100

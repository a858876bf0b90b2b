"""Constantes globales de la aplicación y valores por defecto del *streaming* de pose."""

# --- MODELO DE HEATMAPS ---
# Red tipo CPM: entrada RGB 192x192; la rejilla de salida se lee del tensor.
MODEL_INPUT_WIDTH = 192
MODEL_INPUT_HEIGHT = 192

# --- DECODIFICACIÓN ---
# "edge" divide entre (ancho-1, alto-1); "cell" usa el centro de celda.
DEFAULT_COORDINATE_NORMALIZATION = "edge"
# Un pico con puntuación <= a este umbral se considera ausente.
DEFAULT_MIN_PEAK_CONFIDENCE = 0.0

# --- SUAVIZADO ---
MOVING_AVERAGE_LIMIT = 3
KALMAN_PROCESS_NOISE = 0.1
KALMAN_MEASUREMENT_NOISE = 0.1
KALMAN_INITIAL_ESTIMATE = 0.0
KALMAN_INITIAL_COVARIANCE = 1.0

# --- ETIQUETADO ---
COORDINATE_DECIMALS = 3
CONFIDENCE_DECIMALS = 2
DEFAULT_ABSENT_POLICY = "omit"

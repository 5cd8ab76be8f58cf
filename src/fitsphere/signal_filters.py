"""
Smoothing for real-time acceleration magnitudes.

The step detector smooths gravity-removed magnitudes with a short moving
average held in a fixed-capacity ring buffer.
"""

from collections import deque

import numpy as np


class MovingAverageFilter:
    """
    Moving average over a bounded window of recent samples.
    
    Oldest samples are evicted first once the window is full. Before that the
    average is taken over however many samples have arrived.
    """
    
    def __init__(self, window_size: int):
        """
        Initialize moving average filter.
        
        Args:
            window_size: Number of samples to average
        """
        if window_size < 1:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self.window_size = window_size
        self.buffer = deque(maxlen=window_size)
    
    def filter_sample(self, sample: float) -> float:
        """
        Push a sample and return the mean of the window.
        
        Args:
            sample: Input sample value
            
        Returns:
            Mean of the current window contents
        """
        self.buffer.append(sample)
        return float(np.mean(self.buffer))
    
    def __len__(self) -> int:
        return len(self.buffer)
    
    def reset(self):
        """Reset filter state."""
        self.buffer.clear()


def gravity_removed_magnitude(x: float, y: float, z: float, gravity: float) -> float:
    """
    Magnitude of the acceleration vector minus gravity, clamped at zero.
    
    Args:
        x, y, z: Acceleration components including gravity (m/s^2)
        gravity: Baseline to subtract (m/s^2)
        
    Returns:
        Non-negative gravity-removed magnitude
    """
    magnitude = np.sqrt(x ** 2 + y ** 2 + z ** 2)
    return float(max(magnitude - gravity, 0.0))

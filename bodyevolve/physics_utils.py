import math
from typing import Sequence

from .evolve_constants import BIGG

"""
This module provides the small physics helpers the engine itself needs. semi_to_mean_motion applies Kepler's third law; props_aux_general refreshes the mean motion of every orbiting body from its semi-major axis and the primary-plus-body mass before module auxiliary hooks run, since most modules read it. Body 0 is the primary and binary members keep whatever their module assigns. The functions skip degenerate inputs (non-positive axis or mass) and leave the body untouched.


"""

def semi_to_mean_motion(semi: float, mass: float) -> float:
	if semi <= 0.0 or mass <= 0.0:
		return 0.0
	return math.sqrt(BIGG * mass / (semi * semi * semi))


def props_aux_general(bodies: Sequence) -> None:
	if len(bodies) < 2:
		return
	primary_mass = float(bodies[0].mass)
	for i_body in range(1, len(bodies)):
		body = bodies[i_body]
		if getattr(body, "binary", False):
			continue
		if body.semi <= 0.0:
			continue
		body.mean_motion = semi_to_mean_motion(body.semi, primary_mass + body.mass)

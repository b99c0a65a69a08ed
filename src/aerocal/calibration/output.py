# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Calibration output writer.

Writes EKI ensembles, forward outputs and the synthetic truth to CF-1.6
compliant NetCDF files.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

import numpy as np

from .driver import CalibrationHistory
from .observations import TruthObservation
from .priors import PriorSet

logger = logging.getLogger(__name__)


class CalibrationOutputManager:
    """Writes calibration results to NetCDF."""

    def build_dataset(
        self,
        history: CalibrationHistory,
        prior_set: PriorSet,
        truth: Optional[TruthObservation] = None,
        true_parameters: Optional[Dict[str, float]] = None,
        attrs: Optional[Dict[str, object]] = None,
    ):
        """Assemble the results as an xarray Dataset.

        Args:
            history: Calibration history.
            prior_set: Priors of the calibrated parameters.
            truth: Synthetic observations, if available.
            true_parameters: True parameter values, if known.
            attrs: Extra global attributes.
        """
        import xarray as xr

        constrained = history.parameter_array(prior_set, constrained=True)
        unconstrained = history.parameter_array(prior_set, constrained=False)
        n_params, n_members, n_iterations = constrained.shape

        coords = {
            'parameter': list(prior_set.names),
            'member': np.arange(n_members),
            'iteration': np.arange(n_iterations),
        }
        data_vars = {
            'parameters': (['parameter', 'member', 'iteration'], constrained),
            'unconstrained_parameters': (['parameter', 'member', 'iteration'], unconstrained),
            'ensemble_mean': (['parameter', 'iteration'], constrained.mean(axis=1)),
            'ensemble_std': (
                ['parameter', 'iteration'],
                constrained.std(axis=1, ddof=1) if n_members > 1 else np.zeros((n_params, n_iterations)),
            ),
            'prior_mean': (['parameter'], np.array([p.mean for p in prior_set])),
            'prior_std': (['parameter'], np.array([p.std for p in prior_set])),
        }

        outputs = history.output_array()
        if truth is not None:
            observables = list(truth.names) or [f'obs_{i}' for i in range(truth.n_obs)]
            coords['observable'] = observables
            coords['replicate'] = np.arange(truth.n_replicates)
            data_vars['truth_baseline'] = (['observable'], truth.baseline)
            data_vars['truth_sample'] = (['observable'], truth.sample)
            data_vars['truth_replicates'] = (['replicate', 'observable'], truth.samples)
            data_vars['noise_variance'] = (['observable'], np.diag(truth.noise_cov).copy())
            if outputs.shape[0] > 0:
                coords['evaluated_iteration'] = np.arange(outputs.shape[0])
                data_vars['forward_outputs'] = (
                    ['evaluated_iteration', 'member', 'observable'], outputs
                )

        if true_parameters:
            data_vars['true_value'] = (['parameter'], prior_set.as_vector(true_parameters))

        ds = xr.Dataset(data_vars=data_vars, coords=coords)

        # CF-1.6 attributes
        ds.attrs.update({
            'Conventions': 'CF-1.6',
            'title': 'AEROCAL Ensemble Kalman Inversion Results',
            'method': 'Ensemble Kalman Inversion',
            'n_members': n_members,
            'n_iterations': n_iterations - 1,
            'stopped_early': int(history.stopped),
        })
        if attrs:
            ds.attrs.update(attrs)

        ds['parameters'].attrs = {
            'long_name': 'Ensemble member parameters in constrained (physical) space',
        }
        ds['unconstrained_parameters'].attrs = {
            'long_name': 'Ensemble member parameters in unconstrained space',
        }
        ds['ensemble_mean'].attrs = {'long_name': 'Ensemble mean of constrained parameters'}
        ds['ensemble_std'].attrs = {
            'long_name': 'Ensemble standard deviation of constrained parameters',
        }
        ds['prior_mean'].attrs = {'long_name': 'Prior mean in unconstrained space'}
        ds['prior_std'].attrs = {'long_name': 'Prior standard deviation in unconstrained space'}
        ds['parameter'].attrs = {
            'labels': '; '.join(p.display_name for p in prior_set),
        }
        if 'forward_outputs' in ds:
            ds['forward_outputs'].attrs = {
                'long_name': 'Forward model output per member, evaluated before each update',
            }
        if 'truth_sample' in ds:
            ds['truth_sample'].attrs = {'long_name': 'Observation used as calibration target'}
            ds['truth_baseline'].attrs = {'long_name': 'Noiseless forward output at the true parameters'}

        return ds

    def write(
        self,
        output_path: Path,
        history: CalibrationHistory,
        prior_set: PriorSet,
        truth: Optional[TruthObservation] = None,
        true_parameters: Optional[Dict[str, float]] = None,
        attrs: Optional[Dict[str, object]] = None,
    ) -> Path:
        """Write calibration results to a NetCDF file.

        Returns:
            The path written.
        """
        ds = self.build_dataset(history, prior_set, truth, true_parameters, attrs)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        encoding = {}
        for var in ds.data_vars:
            encoding[str(var)] = {'zlib': True, 'complevel': 4}

        ds.to_netcdf(output_path, encoding=encoding)
        logger.info("Wrote calibration output: %s", output_path)
        return output_path

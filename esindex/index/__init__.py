# Copyright 2025 ApeCloud, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Versioned Search Index Lifecycle

This module manages one logical search index as a series of physical,
uniquely named versions, driven by lifecycle events from a deployment
orchestrator.

Key components:
- LifecycleController: Create / Update / Delete a version for one event
- CompletionPoller: Reports whether the reindex started by an Update is done
- HealthChecker, IndexVersioner, Reindexer, MappingFetcher: the steps the
  controller is built from

A Create produces version `{prefix}-{id}`. An Update produces a new version
and starts copying the previous one into it in the background. A Delete
removes exactly the version it names.
"""

from .controller import LifecycleController
from .health import HealthChecker
from .mapping import MappingFetcher
from .models import ControllerConfig, IndexVersion, LifecycleEvent, LifecycleResult, MappingLocation, RequestType
from .poller import CompletionPoller
from .reindexer import Reindexer
from .versioner import IndexVersioner

__all__ = [
    'LifecycleController',
    'CompletionPoller',
    'HealthChecker',
    'IndexVersioner',
    'Reindexer',
    'MappingFetcher',
    'ControllerConfig',
    'MappingLocation',
    'IndexVersion',
    'LifecycleEvent',
    'LifecycleResult',
    'RequestType',
]

# Copyright 2025 - Oumi
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


class AeroChatError(Exception):
    """Base class for all errors raised by aerochat."""


class SessionBusyError(AeroChatError):
    """Raised when a send is attempted while another exchange is in flight."""


class BackendError(AeroChatError):
    """Raised when the generative backend rejects a request or a stream fails."""


class MalformedChunkError(AeroChatError):
    """Raised when a streamed chunk cannot be interpreted."""

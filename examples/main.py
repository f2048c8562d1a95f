import logging

from arraylegacy import SORT_NATURAL, ArrayLegacy, UnderlyingOperationError


class Track(ArrayLegacy):
    default_attributes = {'title': '', 'artist': '', 'tags': []}

    def getDisplayName(self) -> str:
        return f'{self._attributes["artist"]} - {self._attributes["title"]}'

    def setTitle(self, value: str) -> str:
        self._attributes['title'] = value.strip()
        return self._attributes['title']


def main() -> None:
    track = Track()
    track.setTitle('  Windowlicker ')
    track['artist'] = 'Aphex Twin'
    print('display name:', track.getDisplayName())

    files = ArrayLegacy(['track12.flac', 'track2.flac', 'track1.flac'])
    files.sort(SORT_NATURAL)
    print('sorted:', files.to_array())
    print('contains track2:', files.call('in', 'track2.flac'))
    print('first two:', files.slice(0, 2).to_array())

    try:
        files.sum()
    except UnderlyingOperationError as exc:
        print('error:', exc)

    payload = track.serialize()
    print('restored:', Track.from_bytes(payload).to_array())


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    main()

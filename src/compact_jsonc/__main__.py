from compact_jsonc._compact_jsonc import main

main()

from tsbridge.pipeline import main

main()
